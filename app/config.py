import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Bold TrueType font used for every text tier (falls back to system/Pillow fonts)
    FONT_PATH: str = os.getenv("FONT_PATH", "arialbd.ttf")

    # Fixed brand line drawn at the top of every panel
    BRAND_TITLE: str = os.getenv("BRAND_TITLE", "Wins Wereld")

    # "rounded" or "arched"
    PANEL_STYLE: str = os.getenv("PANEL_STYLE", "rounded").lower()

    # "none" keeps the source image untouched, "darken" blends a black layer under the panel
    CONTRAST_MODE: str = os.getenv("CONTRAST_MODE", "none").lower()
    CONTRAST_ALPHA: float = float(os.getenv("CONTRAST_ALPHA", "0.25"))

    MAX_ADS: int = int(os.getenv("MAX_ADS", "10"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()
