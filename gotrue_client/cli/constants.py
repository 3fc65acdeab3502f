"""Constants for the GoTrue CLI."""

API_KEY_ENV_VAR = "GOTRUE_API_KEY"
API_KEY_HEADER = "apikey"
SERVICE_TOKEN_ENV_VAR = "GOTRUE_SERVICE_TOKEN"

STATE_DIR_NAME = ".gotrue"
STATE_FILE_NAME = "session.json"
