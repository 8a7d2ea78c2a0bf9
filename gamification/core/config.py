"""
Gamification API Configuration
Database, token, payment gateway and media store settings
"""

import os


class Config:
    """Settings read from the environment, with local development defaults"""

    def __init__(self):
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

        # MongoDB
        self.MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
        self.MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "gamification_db")

        # Bearer tokens
        self.JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-key-change-me")
        self.JWT_ALGORITHM = "HS256"
        self.JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))

        # Flutterwave
        self.FLUTTERWAVE_BASE_URL = os.getenv("FLUTTERWAVE_BASE_URL", "https://api.flutterwave.com/v3")
        self.FLUTTERWAVE_SECRET_KEY = os.getenv("FLUTTERWAVE_SECRET_KEY", "")
        self.PAYMENT_REDIRECT_URL = os.getenv("PAYMENT_REDIRECT_URL", "http://localhost:3000/payment-redirect")
        self.PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "USD")

        # Cloudinary
        self.CLOUDINARY_BASE_URL = os.getenv("CLOUDINARY_BASE_URL", "https://api.cloudinary.com/v1_1")
        self.CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
        self.CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
        self.CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")

        # Seeded on startup when both are set
        self.SUPER_ADMIN_EMAIL = os.getenv("SUPER_ADMIN_EMAIL")
        self.SUPER_ADMIN_PASSWORD = os.getenv("SUPER_ADMIN_PASSWORD")

        # Per-request fan-out limits
        self.UPLOAD_CONCURRENCY = int(os.getenv("UPLOAD_CONCURRENCY", "4"))
        self.NOTIFICATION_CONCURRENCY = int(os.getenv("NOTIFICATION_CONCURRENCY", "8"))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def validate(self) -> None:
        """Fail fast on missing secrets in production"""
        if not self.is_production:
            return

        required = {
            "JWT_SECRET": os.getenv("JWT_SECRET"),
            "FLUTTERWAVE_SECRET_KEY": self.FLUTTERWAVE_SECRET_KEY,
            "CLOUDINARY_CLOUD_NAME": self.CLOUDINARY_CLOUD_NAME,
            "CLOUDINARY_API_KEY": self.CLOUDINARY_API_KEY,
            "CLOUDINARY_API_SECRET": self.CLOUDINARY_API_SECRET,
        }
        missing = [key for key, value in required.items() if not value]
        if missing:
            raise RuntimeError(f"FATAL: Missing required environment variables: {', '.join(missing)}")


config = Config()
