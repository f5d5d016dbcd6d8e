"""Process-wide collaborators handed to every service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from domain.repositories.identity_directory import IIdentityDirectory
from domain.repositories.unit_of_work import IUnitOfWork


@dataclass(frozen=True)
class ServiceContext:
    """Built once per process; tests substitute fakes for any member."""

    uow_factory: Callable[[], IUnitOfWork]
    identity_directory: IIdentityDirectory
    clock: Callable[[], datetime] = field(default=datetime.utcnow)
    default_display_name: str = "New User"
