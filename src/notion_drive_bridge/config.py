from pydantic_settings import BaseSettings

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Notion
    notion_api_key: str
    notion_webhook_secret: str
    notion_database_id: str | None = None
    notion_title_property: str = "Name"
    notion_folder_id_property: str = "Drive Folder ID"
    signature_header: str = "X-Notion-Signature"

    # Google service account
    google_service_account_email: str
    google_service_account_private_key: str
    google_token_uri: str = GOOGLE_TOKEN_URI
    drive_scope: str = DRIVE_SCOPE
    drive_root_folder: str = "root"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    # Feature flags
    drive_token_reuse: bool = True
