"""
ActiveCampaign collector.

Lists contacts carrying the prescriber tag and reads their custom field values
through the v3 REST API.

API Docs: https://developers.activecampaign.com/reference
"""

from typing import Any, Dict, Iterator, List, Optional

import requests

from ..constants import CONTACT_PAGE_SIZE, DEFAULT_HTTP_TIMEOUT, FIELD_MAP, PRESCRIBER_TAG_ID
from ..errors import CRMError
from ..utils.logger import PipelineLogger


class ActiveCampaignCollector:
    """
    Read-only ActiveCampaign client.

    Every non-200 response or transport failure raises CRMError; the caller
    decides whether that is fatal (contact listing) or per-record (field values).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        logger: Optional[PipelineLogger] = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
        tag_id: str = PRESCRIBER_TAG_ID,
        page_size: int = CONTACT_PAGE_SIZE,
    ):
        """
        Args:
            base_url: Account host (``myaccount.api-us1.com``) or full https URL
            api_key: ActiveCampaign API token
            session: Optional requests session (injectable for tests)
            logger: Logger instance
            timeout: Request timeout in seconds
            tag_id: Tag that marks a contact as a prescriber
            page_size: Contacts per page
        """
        host = base_url.strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        self.api_root = f"{host}/api/3"
        self.logger = logger
        self.timeout = timeout
        self.tag_id = tag_id
        self.page_size = page_size

        self.session = session or requests.Session()
        self.session.headers.update({"Api-Token": api_key})

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        # Drop empty params the same way the API ignores them
        clean = {k: v for k, v in (params or {}).items() if v is not None and v != ""}
        url = f"{self.api_root}/{path}"

        try:
            response = self.session.get(url, params=clean, timeout=self.timeout)
        except requests.RequestException as e:
            raise CRMError(f"ActiveCampaign request failed for {path}: {e}") from e

        if response.status_code != 200:
            raise CRMError(
                f"ActiveCampaign API {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CRMError(f"ActiveCampaign returned invalid JSON for {path}") from e

    def iter_contact_pages(self) -> Iterator[List[Dict[str, Any]]]:
        """
        Yield pages of tagged contacts.

        Stops once the accumulated count reaches the reported total, or when a
        page comes back empty (guards against an overstated meta.total).
        """
        offset = 0
        fetched = 0
        while True:
            data = self._get(
                "contacts",
                {"tagid": self.tag_id, "limit": self.page_size, "offset": offset},
            )
            contacts = data.get("contacts") or []
            try:
                total = int((data.get("meta") or {}).get("total") or 0)
            except (TypeError, ValueError):
                total = 0

            fetched += len(contacts)
            if self.logger:
                self.logger.info(f"  Fetched {fetched} / {total}")

            if contacts:
                yield contacts
            if fetched >= total or not contacts:
                break
            offset += self.page_size

    def fetch_all_contacts(self) -> List[Dict[str, Any]]:
        """Return every contact carrying the prescriber tag."""
        if self.logger:
            self.logger.info(f"Fetching prescribers from ActiveCampaign (tag {self.tag_id})...")
        contacts: List[Dict[str, Any]] = []
        for page in self.iter_contact_pages():
            contacts.extend(page)
        return contacts

    def fetch_field_values(self, contact_id: str) -> Dict[str, str]:
        """
        Fetch a contact's custom fields mapped to semantic names.

        Unrecognized field IDs and blank values are dropped.
        """
        data = self._get(f"contacts/{contact_id}/fieldValues")
        return map_field_values(data.get("fieldValues") or [])


def map_field_values(field_values: List[Dict[str, Any]], field_map: Dict[str, str] = FIELD_MAP) -> Dict[str, str]:
    """Translate raw fieldValues entries into {semantic_name: value}."""
    fields: Dict[str, str] = {}
    for fv in field_values:
        name = field_map.get(str(fv.get("field")))
        value = fv.get("value")
        if not name or value is None:
            continue
        value = str(value).strip()
        if value:
            fields[name] = value
    return fields
