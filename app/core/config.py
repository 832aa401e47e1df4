import os
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
	# Accept a direct URL (supports either DATABASE_URL or database_url env vars)
	database_url: str | None = None

	DB_DRIVER: str = "postgresql+psycopg2"
	DB_HOST: str = "localhost"
	DB_USER: str = "postgres"
	DB_PASSWORD: str = "postgres"
	DB_NAME: str = "vyronamart"
	DB_PORT: int = 5432

	SECRET_KEY: str = "secret"
	ALGORITHM: str = "HS256"
	ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

	# Observability / Telemetry flags
	ENABLE_REQUEST_LOGGING: bool = True
	ENABLE_OUTBOUND_LOGGING: bool = True
	LOG_SAMPLE_RATE: float = 1.0
	LOG_LEVEL: str = "INFO"

	# Shopping groups
	ROOM_CODE_LENGTH: int = 6
	ROOM_CODE_MAX_ATTEMPTS: int = 10
	GROUP_MAX_MEMBERS: int = 10

	# UPI payment intents
	UPI_PAYEE_ID: str = os.getenv("UPI_PAYEE_ID", "vyronamart@icici")
	UPI_PAYEE_NAME: str = os.getenv("UPI_PAYEE_NAME", "VyronaMart")
	UPI_CURRENCY: str = "INR"
	PAYMENT_INTENT_TTL_HOURS: int = 24
	QR_BOX_SIZE: int = 10
	QR_BORDER: int = 2

	# Brevo transactional email
	BREVO_API_KEY: str | None = None
	BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
	BREVO_TIMEOUT_SECONDS: float = 10.0
	EMAIL_SENDER_NAME: str = "VyronaMart"
	EMAIL_SENDER_ADDRESS: str = "orders@vyronamart.com"

	# Prefer explicit database_url if provided; otherwise assemble from parts
	@property
	def DATABASE_URL(self) -> str:
		# 1) Value from settings (supports .env and OS env via BaseSettings)
		if self.database_url and self.database_url.strip() and self.database_url.strip() != "://:@:/":
			return self.database_url.strip()
		# 2) Raw OS env (e.g., uppercase on Windows), as a fallback
		explicit_url = os.getenv("DATABASE_URL")
		if explicit_url and explicit_url.strip() and explicit_url.strip() != "://:@:/":
			return explicit_url.strip()
		# 3) Assemble from parts
		return f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

	# Pydantic v2 settings config
	model_config = SettingsConfigDict(
		env_file=".env",
		extra="ignore",  # tolerate unrelated env vars like database_url
		case_sensitive=False,  # accept lowercase keys on Windows and in .env
	)

settings = Settings()
