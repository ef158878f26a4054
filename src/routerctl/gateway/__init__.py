"""Device gateway implementations."""

from routerctl.gateway.http import HttpGateway  # noqa: F401
