from files_manager.models import file_model, user_model  # noqa: F401
