from src.core.repositories.organizations import OrganizationRepository

__all__ = ["OrganizationRepository"]
