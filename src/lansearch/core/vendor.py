"""Vendor lookup from the OUI (first three bytes) of a MAC address."""

from __future__ import annotations

import logging

from lansearch.utils.net import canonical_mac

logger = logging.getLogger(__name__)

# Subset of the IEEE registry covering hardware common on home networks.
OUI_TABLE: dict[str, str] = {
    "00:07:CB": "Freebox",
    "14:0C:76": "Freebox",
    "F4:CA:E5": "Freebox",
    "00:27:22": "Ubiquiti",
    "24:A4:3C": "Ubiquiti",
    "78:8A:20": "Ubiquiti",
    "FC:EC:DA": "Ubiquiti",
    "B8:27:EB": "Raspberry Pi",
    "DC:A6:32": "Raspberry Pi",
    "E4:5F:01": "Raspberry Pi",
    "24:0A:C4": "Espressif",
    "30:AE:A4": "Espressif",
    "00:11:32": "Synology",
    "00:1E:C2": "Apple",
    "00:23:DF": "Apple",
    "00:25:00": "Apple",
    "00:12:FB": "Samsung",
    "00:15:99": "Samsung",
    "00:16:6C": "Samsung",
    "00:27:19": "TP-Link",
    "00:50:43": "TP-Link",
    "04:8D:38": "TP-Link",
    "00:1A:11": "Google",
    "0C:8B:FD": "Google",
    "00:FC:58": "Amazon",
    "0C:47:C9": "Amazon",
    "00:13:CE": "Intel",
    "00:1B:21": "Intel",
    "00:1E:67": "Intel",
    "00:09:5B": "Netgear",
    "00:0F:B5": "Netgear",
    "00:13:A9": "Sony",
    "00:16:FE": "Sony",
    "00:9E:C8": "Xiaomi",
    "04:4E:5A": "Xiaomi",
    "00:03:FF": "Microsoft",
    "00:15:5D": "Microsoft",
    "00:50:56": "VMware",
    "08:00:27": "VirtualBox",
}

INVALID_VENDORS = {"", "0", "unknown", "null", "undefined"}


def extract_oui(mac: str | None) -> str:
    cleaned = canonical_mac(mac)
    if len(cleaned) != 12:
        return ""
    return ":".join(cleaned[i : i + 2] for i in range(0, 6, 2))


def is_valid_vendor(value: object) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() not in INVALID_VENDORS


def lookup_vendor(mac: str | None) -> str | None:
    oui = extract_oui(mac)
    if not oui:
        logger.debug("Invalid MAC address format: %s", mac)
        return None
    vendor = OUI_TABLE.get(oui)
    if vendor is None:
        logger.debug("No vendor found for MAC %s (OUI %s)", mac, oui)
    return vendor
