# Shared Common Library for the Pet-Care Marketplace
# This package contains shared authentication, permissions, error handling
# and other common components used across the microservices.
#
# Submodules import Django and DRF, so they are not re-exported here:
# import them directly (``from shared.common.permissions import IsPetOwner``)
# once Django settings are configured.

__version__ = "1.0.0"

__all__ = [
    '__version__',
]
