"""
Resolved restaurant settings for the storefront client.

The server may return a partial record (or its built-in defaults). Defaults
are applied here once, so the rest of the client reads plain attributes
without fallback chains.
"""

from typing import Any, Mapping, Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel, to_snake

from storefront.core.config import Settings, get_settings
from storefront.schemas import CamelModel


class StoreSettings(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    restaurant_name: str
    whatsapp_number: str = ""
    currency: str
    logo_url: Optional[str] = None
    footer_text: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    contact_address: Optional[str] = None
    contact_address_link: Optional[str] = None

    @classmethod
    def resolve(
        cls,
        payload: Optional[Mapping[str, Any]] = None,
        config: Optional[Settings] = None,
    ) -> "StoreSettings":
        """
        Build settings from an API payload, filling blanks with defaults.

        Empty strings count as missing, so a saved but blank restaurant name
        still renders as the default.
        """
        config = config or get_settings()
        provided = {
            to_snake(key): value
            for key, value in (payload or {}).items()
            if value is not None and value != ""
        }
        return cls(**{
            "restaurant_name": config.default_restaurant_name,
            "currency": config.default_currency,
            **provided,
        })

    @property
    def can_take_orders(self) -> bool:
        """Orders can only be sent once a WhatsApp number is configured."""
        return bool(self.whatsapp_number)
