"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
Import concrete services from their modules (services.wallet_service, ...);
domain.exceptions depends on services.error_codes, so this package stays free
of eager imports.
"""
