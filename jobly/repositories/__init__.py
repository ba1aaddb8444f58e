from .base import Repository
from .companies import CompanyRepository
from .jobs import JobRepository
from .users import UserRepository

__all__ = ["Repository", "CompanyRepository", "JobRepository", "UserRepository"]
