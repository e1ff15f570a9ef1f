from dataclasses import dataclass

from src.booknotes.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
