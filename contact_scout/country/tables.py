# contact_scout/country/tables.py
"""
Static, read-only lookup tables for country inference.

Loaded once at import and shared by every concurrent crawl.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping

# country names and common local spellings -> ISO 3166-1 alpha-2
# ("us" is left out on purpose: it collides with "contact us")
COUNTRY_NAMES: Mapping[str, str] = MappingProxyType({
    "afghanistan": "AF", "albania": "AL", "algeria": "DZ", "andorra": "AD",
    "angola": "AO", "argentina": "AR", "armenia": "AM", "australia": "AU",
    "austria": "AT", "österreich": "AT", "azerbaijan": "AZ", "bahrain": "BH",
    "bangladesh": "BD", "belarus": "BY", "belgium": "BE", "belgique": "BE", "belgië": "BE",
    "bolivia": "BO", "bosnia and herzegovina": "BA", "bosnia": "BA", "botswana": "BW",
    "brazil": "BR", "brasil": "BR", "brunei": "BN", "bulgaria": "BG", "българия": "BG",
    "cambodia": "KH", "cameroon": "CM", "canada": "CA", "chile": "CL",
    "china": "CN", "colombia": "CO", "congo": "CG", "costa rica": "CR",
    "croatia": "HR", "hrvatska": "HR", "cuba": "CU", "cyprus": "CY",
    "czech republic": "CZ", "czechia": "CZ", "česká republika": "CZ", "denmark": "DK", "danmark": "DK",
    "dominican republic": "DO", "ecuador": "EC", "egypt": "EG", "estonia": "EE", "eesti": "EE",
    "ethiopia": "ET", "finland": "FI", "suomi": "FI", "france": "FR",
    "georgia": "GE", "germany": "DE", "deutschland": "DE", "ghana": "GH",
    "greece": "GR", "ελλάδα": "GR", "guatemala": "GT", "honduras": "HN",
    "hong kong": "HK", "hungary": "HU", "magyarország": "HU", "iceland": "IS", "india": "IN",
    "indonesia": "ID", "iran": "IR", "iraq": "IQ", "ireland": "IE",
    "israel": "IL", "italy": "IT", "italia": "IT", "jamaica": "JM", "japan": "JP",
    "jordan": "JO", "kazakhstan": "KZ", "казахстан": "KZ", "kenya": "KE", "south korea": "KR",
    "republic of korea": "KR", "korea": "KR", "kuwait": "KW", "latvia": "LV", "latvija": "LV",
    "lebanon": "LB", "libya": "LY", "lithuania": "LT", "lietuva": "LT", "luxembourg": "LU",
    "malaysia": "MY", "malta": "MT", "mexico": "MX", "méxico": "MX", "moldova": "MD",
    "monaco": "MC", "mongolia": "MN", "morocco": "MA", "maroc": "MA", "mozambique": "MZ",
    "myanmar": "MM", "nepal": "NP", "netherlands": "NL", "the netherlands": "NL",
    "nederland": "NL", "holland": "NL", "new zealand": "NZ", "nicaragua": "NI",
    "nigeria": "NG", "norway": "NO", "norge": "NO", "oman": "OM", "pakistan": "PK",
    "panama": "PA", "paraguay": "PY", "peru": "PE", "philippines": "PH",
    "poland": "PL", "polska": "PL", "portugal": "PT", "qatar": "QA", "romania": "RO", "românia": "RO",
    "russia": "RU", "russian federation": "RU", "россия": "RU", "российская федерация": "RU",
    "saudi arabia": "SA", "senegal": "SN", "serbia": "RS", "srbija": "RS", "singapore": "SG",
    "slovakia": "SK", "slovensko": "SK", "slovenia": "SI", "slovenija": "SI",
    "south africa": "ZA", "spain": "ES", "españa": "ES", "sri lanka": "LK",
    "sweden": "SE", "sverige": "SE", "switzerland": "CH", "schweiz": "CH", "suisse": "CH", "svizzera": "CH",
    "syria": "SY", "taiwan": "TW", "tanzania": "TZ", "thailand": "TH", "tunisia": "TN",
    "turkey": "TR", "türkiye": "TR", "uganda": "UG", "ukraine": "UA", "україна": "UA", "украина": "UA",
    "united arab emirates": "AE", "uae": "AE", "united kingdom": "GB", "uk": "GB",
    "great britain": "GB", "england": "GB", "scotland": "GB", "wales": "GB",
    "united states": "US", "united states of america": "US", "usa": "US", "u.s.a.": "US",
    "uruguay": "UY", "uzbekistan": "UZ", "o'zbekiston": "UZ", "venezuela": "VE", "vietnam": "VN",
    "viet nam": "VN", "yemen": "YE", "zambia": "ZM", "zimbabwe": "ZW",
})

# E.164 country calling codes -> ISO-2 ("1" resolves to US; CA shares it)
DIAL_CODES: Mapping[str, str] = MappingProxyType({
    "1": "US", "7": "RU",
    "20": "EG", "27": "ZA", "30": "GR", "31": "NL", "32": "BE", "33": "FR", "34": "ES",
    "36": "HU", "39": "IT", "40": "RO", "41": "CH", "43": "AT", "44": "GB", "45": "DK",
    "46": "SE", "47": "NO", "48": "PL", "49": "DE", "51": "PE", "52": "MX", "53": "CU",
    "54": "AR", "55": "BR", "56": "CL", "57": "CO", "58": "VE", "60": "MY", "61": "AU",
    "62": "ID", "63": "PH", "64": "NZ", "65": "SG", "66": "TH", "81": "JP", "82": "KR",
    "84": "VN", "86": "CN", "90": "TR", "91": "IN", "92": "PK", "93": "AF", "94": "LK",
    "95": "MM", "98": "IR",
    "212": "MA", "213": "DZ", "216": "TN", "218": "LY", "220": "GM", "233": "GH",
    "234": "NG", "254": "KE", "255": "TZ", "256": "UG", "260": "ZM", "263": "ZW",
    "351": "PT", "352": "LU", "353": "IE", "354": "IS", "355": "AL", "356": "MT",
    "357": "CY", "358": "FI", "359": "BG", "370": "LT", "371": "LV", "372": "EE",
    "373": "MD", "374": "AM", "375": "BY", "376": "AD", "377": "MC", "378": "SM",
    "380": "UA", "381": "RS", "382": "ME", "385": "HR", "386": "SI", "387": "BA",
    "389": "MK", "420": "CZ", "421": "SK", "852": "HK", "880": "BD", "886": "TW",
    "960": "MV", "961": "LB", "962": "JO", "963": "SY", "964": "IQ", "965": "KW",
    "966": "SA", "967": "YE", "968": "OM", "971": "AE", "972": "IL", "973": "BH",
    "974": "QA", "975": "BT", "976": "MN", "977": "NP", "992": "TJ", "993": "TM",
    "994": "AZ", "995": "GE", "996": "KG", "998": "UZ",
})

GENERIC_TLDS: FrozenSet[str] = frozenset({
    "com", "net", "org", "biz", "info", "io", "app", "dev", "ai", "co", "xyz", "online", "site", "shop", "tech",
})

# ccTLD (without the dot) -> ISO-2
CCTLDS: Mapping[str, str] = MappingProxyType({
    "af": "AF", "al": "AL", "dz": "DZ", "ad": "AD", "ao": "AO", "ar": "AR", "am": "AM",
    "au": "AU", "at": "AT", "az": "AZ", "bh": "BH", "bd": "BD", "by": "BY", "be": "BE",
    "bo": "BO", "ba": "BA", "bw": "BW", "br": "BR", "bn": "BN", "bg": "BG", "kh": "KH",
    "cm": "CM", "ca": "CA", "cl": "CL", "cn": "CN", "cg": "CG", "cr": "CR",
    "hr": "HR", "cu": "CU", "cy": "CY", "cz": "CZ", "dk": "DK", "do": "DO", "ec": "EC",
    "eg": "EG", "ee": "EE", "et": "ET", "fi": "FI", "fr": "FR", "ge": "GE", "de": "DE",
    "gh": "GH", "gr": "GR", "gt": "GT", "hn": "HN", "hk": "HK", "hu": "HU", "is": "IS",
    "in": "IN", "id": "ID", "ir": "IR", "iq": "IQ", "ie": "IE", "il": "IL", "it": "IT",
    "jm": "JM", "jp": "JP", "jo": "JO", "kz": "KZ", "ke": "KE", "kr": "KR", "kw": "KW",
    "lv": "LV", "lb": "LB", "ly": "LY", "lt": "LT", "lu": "LU", "my": "MY", "mt": "MT",
    "mx": "MX", "md": "MD", "mc": "MC", "mn": "MN", "ma": "MA", "mz": "MZ", "mm": "MM",
    "np": "NP", "nl": "NL", "nz": "NZ", "ni": "NI", "ng": "NG", "no": "NO", "om": "OM",
    "pk": "PK", "pa": "PA", "py": "PY", "pe": "PE", "ph": "PH", "pl": "PL", "pt": "PT",
    "qa": "QA", "ro": "RO", "ru": "RU", "sa": "SA", "sn": "SN", "rs": "RS", "sg": "SG",
    "sk": "SK", "si": "SI", "za": "ZA", "es": "ES", "lk": "LK", "se": "SE", "ch": "CH",
    "sy": "SY", "tw": "TW", "tz": "TZ", "th": "TH", "tn": "TN", "tr": "TR", "ug": "UG",
    "ua": "UA", "ae": "AE", "uk": "GB", "gb": "GB", "us": "US", "uy": "UY", "uz": "UZ",
    "ve": "VE", "vn": "VN", "ye": "YE", "zm": "ZM", "zw": "ZW",
})

__all__ = ["CCTLDS", "COUNTRY_NAMES", "DIAL_CODES", "GENERIC_TLDS"]
