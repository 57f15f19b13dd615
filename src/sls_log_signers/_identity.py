"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from .interfaces.identity import Identity


def _is_past(expiration: datetime | None) -> bool:
    if expiration is None:
        return False
    return expiration < datetime.now(UTC)


@dataclass(frozen=True, kw_only=True)
class LogCredentialSnapshot(Identity):
    access_key_id: str
    access_key_secret: str
    security_token: str | None = None
    expiration: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """Whether the credential had expired when checked."""
        return _is_past(self.expiration)


@dataclass(kw_only=True)
class LogCredentialIdentity(Identity):
    """Mutable key pair plus optional STS token.

    Rotation is a plain field overwrite with no locking. Signers read the
    fields once per request through :meth:`snapshot`, so a rotation only
    affects requests that have not taken their snapshot yet. ``expiration``
    is the STS token's expiry, if known.
    """

    access_key_id: str
    access_key_secret: str
    security_token: str | None = None
    expiration: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """Whether the identity is expired."""
        return _is_past(self.expiration)

    def update(
        self,
        access_key_id: str,
        access_key_secret: str,
        security_token: str | None = None,
        expiration: datetime | None = None,
    ) -> None:
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        self.security_token = security_token
        self.expiration = expiration

    def snapshot(self) -> LogCredentialSnapshot:
        return LogCredentialSnapshot(
            access_key_id=self.access_key_id,
            access_key_secret=self.access_key_secret,
            security_token=self.security_token,
            expiration=self.expiration,
        )
