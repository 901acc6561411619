"""Services that coordinate checks over files and directories."""

from tokensniff.services.check_service import CheckReport, CheckService, FileResult

__all__ = ["CheckReport", "CheckService", "FileResult"]
