from typing import Optional


class NestExporterError(Exception):
    pass


class NestAPIError(NestExporterError):
    """Unable to fetch or decode the device list from the Nest API"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NestExporterConfigError(NestExporterError):
    pass
