from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import structlog

from magicauth.core.core import Service
from magicauth.core.modules.magic_link.encryption import DecryptionError
from magicauth.core.modules.magic_link.models import (
    LINK_EXPIRATION_TIME,
    MAGIC_LINK_PATH,
    MAGIC_LINK_SEARCH_PARAM,
    MagicLinkClaim,
    parse_claim_payload,
)
from magicauth.errors import ExpiredMagicLinkError, InvalidMagicLinkError, ValidationError
from magicauth.utils import parse_iso_string

logger = structlog.get_logger(__name__)


class MagicLinkService(Service):
    """Issues and validates encrypted, expiring login links."""

    def get_magic_link(self, email_address: str, domain_url: str) -> str:
        """Build `<domain_url>/magic?kodyKey=<token>` for the given address.

        Other query parameters and the fragment of `domain_url` are kept.
        """
        try:
            parts = urlsplit(domain_url)
        except ValueError:
            raise ValidationError(f"Invalid domain URL: {domain_url!r}") from None
        if not parts.scheme or not parts.netloc:
            raise ValidationError(f"Invalid domain URL: {domain_url!r}")

        claim = MagicLinkClaim(email_address=email_address, expires_at=self.now() + LINK_EXPIRATION_TIME)
        token = self.core.encryptor.encrypt(claim.serialize())

        query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != MAGIC_LINK_SEARCH_PARAM]
        query.append((MAGIC_LINK_SEARCH_PARAM, token))
        return urlunsplit(parts._replace(path=f"/{MAGIC_LINK_PATH}", query=urlencode(query)))

    def validate_magic_link(self, validation_email: str, link: str) -> None:
        """Check that `link` carries an unexpired claim for `validation_email`.

        Raises:
            InvalidMagicLinkError: link is malformed, tampered or issued for another address
            ExpiredMagicLinkError: link is well formed but past its expiration
        """
        try:
            query = parse_qsl(urlsplit(link).query, keep_blank_values=True)
            token = next((value for key, value in query if key == MAGIC_LINK_SEARCH_PARAM), "[]")
            email, expiration = parse_claim_payload(self.core.encryptor.decrypt(token))
        except (ValueError, DecryptionError) as e:
            logger.warning("magic_link_rejected", reason="undecodable", error=str(e))
            raise InvalidMagicLinkError from None

        if not isinstance(email, str):
            logger.warning("magic_link_rejected", reason="email_not_string")
            raise InvalidMagicLinkError

        if not isinstance(expiration, str):
            logger.warning("magic_link_rejected", reason="expiration_not_string")
            raise InvalidMagicLinkError

        if email != validation_email:
            logger.warning("magic_link_rejected", reason="email_mismatch")
            raise InvalidMagicLinkError

        try:
            expires_at = parse_iso_string(expiration)
        except ValueError:
            logger.warning("magic_link_rejected", reason="invalid_expiration")
            raise InvalidMagicLinkError from None

        if self.core.clock() > expires_at:
            logger.info("magic_link_expired", expired_at=expiration)
            raise ExpiredMagicLinkError
