from dataclasses import dataclass, replace
from typing import TypeVar

import httpx

from onboarding.forms.validation import only_digits
from onboarding.logging.logger import Log
from onboarding.postal.exceptions import PostalLookupError

CEP_LENGTH = 8

_Addressable = TypeVar("_Addressable")


@dataclass(frozen=True)
class PostalAddress:
    street: str
    neighborhood: str
    city: str
    state: str

    @property
    def city_with_state(self) -> str:
        return f"{self.city}/{self.state}"


class PostalCodeClient:
    """ViaCEP lookup: ``GET {base_url}/{cep}/json/``."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: int,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def close(self) -> None:
        self._client.close()

    def lookup(self, postal_code: str) -> PostalAddress | None:
        """Return the address for a CEP, or None when the code is unknown.

        Codes that are not 8 digits after stripping punctuation are not
        looked up at all.

        Raises:
            PostalLookupError: on network errors or an unreadable response.
        """
        cep = only_digits(postal_code)
        if len(cep) != CEP_LENGTH:
            return None
        try:
            response = self._client.get(f"{self._base_url}/{cep}/json/")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise PostalLookupError(f"Postal lookup failed for {cep}: {exc}") from exc
        except ValueError as exc:
            raise PostalLookupError(f"Postal lookup returned invalid JSON for {cep}") from exc

        if not isinstance(data, dict):
            raise PostalLookupError(f"Postal lookup returned unexpected payload for {cep}")
        if data.get("erro"):
            Log.info("Postal code not found", cep=cep)
            return None
        return PostalAddress(
            street=str(data.get("logradouro") or ""),
            neighborhood=str(data.get("bairro") or ""),
            city=str(data.get("localidade") or ""),
            state=str(data.get("uf") or ""),
        )

    def autofill(self, info: _Addressable) -> _Addressable:
        """Fill street, neighborhood and city on a form section from its zip code.

        Lookup failures are logged and leave ``info`` unchanged; number and
        complement are never touched.
        """
        zip_code = getattr(info, "zip_code")
        try:
            address = self.lookup(zip_code)
        except PostalLookupError as exc:
            Log.error(f"Erro ao buscar CEP: {exc}")
            return info
        if address is None:
            return info
        return replace(  # type: ignore[type-var]
            info,
            address=address.street,
            neighborhood=address.neighborhood,
            city=address.city_with_state,
        )
