import os
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Themes currently active on the site and in the admin area
    FRONT_THEME = os.getenv("FRONT_THEME", "FrontendTheme")
    BACK_THEME = os.getenv("BACK_THEME", "BackendTheme")

    THEMES = {
        "FrontendTheme": {
            "human_name": "Frontend Theme",
            "description": "Default theme for the public site.",
            "regions": {
                "main-menu": "Main menu",
                "sub-menu": "Sub menu",
                "sidebar": "Sidebar",
                "footer": "Footer",
            },
        },
        "BackendTheme": {
            "human_name": "Backend Theme",
            "description": "Administration area theme.",
            "regions": {
                "main-menu": "Main menu",
                "dashboard-main": "Dashboard main",
                "dashboard-sidebar": "Dashboard sidebar",
            },
        },
    }

    LANGUAGES = {
        "en_US": "English",
        "es_ES": "Spanish",
        "fr_FR": "French",
        "de_DE": "German",
    }

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///blocks-dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}
