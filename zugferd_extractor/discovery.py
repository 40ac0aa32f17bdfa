"""
Selection of the invoice XML among a container's attachments.
"""

from collections.abc import Mapping, Sequence

from .classifier import is_likely_invoice_xml
from .config import KNOWN_XML_FILENAMES, logger
from .exceptions import NoInvoiceXMLError
from .schemas import CandidateXML


def find_invoice_xml(
    attachments: Mapping[str, bytes],
    known_names: Sequence[str] = KNOWN_XML_FILENAMES,
) -> CandidateXML:
    """
    Pick the attachment holding the invoice XML.

    Canonical names are checked first, in priority order. After that any
    ``.xml`` attachment whose content passes the classifier is accepted.
    A canonical name with non-invoice content does not stop the search.

    Raises:
        NoInvoiceXMLError: If no attachment qualifies
    """
    for known_name in known_names:
        data = attachments.get(known_name)
        if data is None:
            continue
        if is_likely_invoice_xml(data):
            logger.debug(f"  Standard ZUGFeRD XML found: {known_name}")
            return CandidateXML(data=data, name=known_name)
        logger.debug(f"  {known_name} found, but content does not look like ZUGFeRD XML")

    for filename, data in attachments.items():
        if filename in known_names or not filename.lower().endswith(".xml"):
            continue
        if is_likely_invoice_xml(data):
            logger.debug(f"  ZUGFeRD XML found under non-standard name: {filename}")
            return CandidateXML(data=data, name=filename)

    raise NoInvoiceXMLError(sorted(attachments))
