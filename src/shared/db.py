"""Schema management for SQL-backed providers of a Protean domain."""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield name, provider


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity bound to a SQL provider."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching the DAO registers the model's table on the provider metadata
            for registry in (domain.registry.aggregates, domain.registry.entities):
                for _, record in registry.items():
                    if record.cls.meta_.provider == name:
                        domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            logger.info("Schema created", domain=domain.name, provider=name)


def drop_db(domain: Domain) -> None:
    """Drop every table known to the domain's SQL providers."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Schema dropped", domain=domain.name, provider=name)
