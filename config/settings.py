"""
Configuration settings for the Maturity Assessment pipeline
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Tuple
from types import MappingProxyType


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""
    # App
    APP_NAME = "Maturity Assessment"
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///maturity_assessment.db'
    )
    # Fix for Render PostgreSQL URLs
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Analyzer panel
    ANALYZER_PARALLEL = _env_bool('ANALYZER_PARALLEL', True)
    ANALYZER_MAX_WORKERS = int(os.environ.get('ANALYZER_MAX_WORKERS', '10'))

    # Recommendations
    TACTICAL_SCORE_THRESHOLD = float(os.environ.get('TACTICAL_SCORE_THRESHOLD', '40'))

    # Questionnaire
    DEFAULT_SECTOR = os.environ.get('DEFAULT_SECTOR', 'all')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///maturity_assessment_dev.db'
    )


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    # Ensure secret key is set in production
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY and os.environ.get('FLASK_ENV') == 'production':
        raise ValueError("SECRET_KEY must be set in production")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    ANALYZER_PARALLEL = False


# Config mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get config based on environment"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])


# =============================================================================
# Pipeline reference data
# =============================================================================

SECTORS: Mapping[str, str] = MappingProxyType({
    'education': 'Private Education',
    'healthcare': 'Healthcare & Beauty',
    'fnb': 'Food & Beverage',
    'retail': 'Specialty Retail',
    'professional_services': 'Professional Services',
    'real_estate': 'Real Estate',
    'fitness': 'Fitness & Personal Services',
    'crafts': 'Crafts & Handmade',
})

SESSION_TYPES: Tuple[str, ...] = ('full', 'quick', 'deep_dive', 'follow_up')

# Categories that make no sense for a sector are never asked there
SECTOR_EXCLUSIONS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    'professional_services': frozenset({'inventory', 'supply_chain'}),
    'education': frozenset({'inventory', 'supply_chain'}),
    'fitness': frozenset({'supply_chain'}),
})


@dataclass(frozen=True)
class PipelineSettings:
    """Immutable knobs handed to the pipeline components."""
    analyzer_parallel: bool = True
    analyzer_max_workers: int = 10
    tactical_score_threshold: float = 40.0
    default_sector: str = 'all'
    sectors: Mapping[str, str] = field(default_factory=lambda: SECTORS)
    sector_exclusions: Mapping[str, FrozenSet[str]] = field(default_factory=lambda: SECTOR_EXCLUSIONS)
    session_types: Tuple[str, ...] = SESSION_TYPES

    def excluded_categories(self, sector: str) -> FrozenSet[str]:
        return self.sector_exclusions.get(sector, frozenset())

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'PipelineSettings':
        """Build settings from a Flask config (or any mapping of config keys)."""
        return cls(
            analyzer_parallel=bool(values.get('ANALYZER_PARALLEL', True)),
            analyzer_max_workers=int(values.get('ANALYZER_MAX_WORKERS', 10)),
            tactical_score_threshold=float(values.get('TACTICAL_SCORE_THRESHOLD', 40.0)),
            default_sector=values.get('DEFAULT_SECTOR', 'all'),
        )

    @classmethod
    def from_config(cls, config_class=None) -> 'PipelineSettings':
        config_class = config_class or get_config()
        values: Dict[str, Any] = {
            key: getattr(config_class, key)
            for key in dir(config_class) if key.isupper()
        }
        return cls.from_mapping(values)
