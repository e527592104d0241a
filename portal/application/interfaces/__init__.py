"""Ports the provisioning services depend on."""

from portal.application.interfaces.services import (
    IIdentityProvider,
    INotifier,
    IProfileStore,
    ISecretCipher,
)

__all__ = ["IIdentityProvider", "INotifier", "IProfileStore", "ISecretCipher"]
