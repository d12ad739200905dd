import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-change-me'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///learnhub.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Local GGUF model used for doubts, quizzes and chat
    LLM_MODEL_PATH = os.environ.get('LLM_MODEL_PATH')
    LLM_CONTEXT_SIZE = int(os.environ.get('LLM_CONTEXT_SIZE', 2048))
    LLM_TEMPERATURE = float(os.environ.get('LLM_TEMPERATURE', 0.3))
    LLM_MAX_TOKENS = int(os.environ.get('LLM_MAX_TOKENS', 512))

    QUIZ_QUESTION_COUNT = int(os.environ.get('QUIZ_QUESTION_COUNT', 3))
    CHAT_HISTORY_LIMIT = int(os.environ.get('CHAT_HISTORY_LIMIT', 20))

    SEED_DEMO_USERS = _env_flag('SEED_DEMO_USERS', True)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    SEED_DEMO_USERS = _env_flag('SEED_DEMO_USERS', False)


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SEED_DEMO_USERS = False
    LLM_MODEL_PATH = None


CONFIGS = {
    'development': 'learnhub.config.DevelopmentConfig',
    'production': 'learnhub.config.ProductionConfig',
    'testing': 'learnhub.config.TestingConfig',
}


def config_for_env(env=None):
    """Return the import path of the config class selected by ``APP_ENV``."""
    env = env or os.environ.get('APP_ENV', 'development')
    return CONFIGS.get(env, 'learnhub.config.Config')
