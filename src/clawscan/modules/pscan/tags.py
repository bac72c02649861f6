"""Alert tag constants shared by detectors and consumed by reporting."""

from enum import Enum

CVE_REFERENCE_URL = "https://nvd.nist.gov/vuln/detail/{cve}"


class CommonAlertTag(Enum):
    """Classification tags mapped to the page that describes them."""

    OWASP_2021_A01_BROKEN_AC = (
        "OWASP_2021_A01",
        "https://owasp.org/Top10/A01_2021-Broken_Access_Control/",
    )
    OWASP_2021_A03_INJECTION = (
        "OWASP_2021_A03",
        "https://owasp.org/Top10/A03_2021-Injection/",
    )
    OWASP_2021_A06_VULN_COMP = (
        "OWASP_2021_A06",
        "https://owasp.org/Top10/A06_2021-Vulnerable_and_Outdated_Components/",
    )
    OWASP_2017_A01_INJECTION = (
        "OWASP_2017_A01",
        "https://owasp.org/www-project-top-ten/2017/A1_2017-Injection.html",
    )
    OWASP_2017_A03_DATA_EXPOSED = (
        "OWASP_2017_A03",
        "https://owasp.org/www-project-top-ten/2017/A3_2017-Sensitive_Data_Exposure.html",
    )
    OWASP_2017_A05_BROKEN_AC = (
        "OWASP_2017_A05",
        "https://owasp.org/www-project-top-ten/2017/A5_2017-Broken_Access_Control.html",
    )
    OWASP_2017_A09_VULN_COMP = (
        "OWASP_2017_A09",
        "https://owasp.org/www-project-top-ten/2017/"
        "A9_2017-Using_Components_with_Known_Vulnerabilities.html",
    )
    WSTG_V42_ATHN_06_CACHE_WEAKNESS = (
        "WSTG-v42-ATHN-06",
        "https://owasp.org/www-project-web-security-testing-guide/v42/"
        "4-Web_Application_Security_Testing/04-Authentication_Testing/"
        "06-Testing_for_Browser_Cache_Weaknesses",
    )
    WSTG_V42_CRYP_01_TLS = (
        "WSTG-v42-CRYP-01",
        "https://owasp.org/www-project-web-security-testing-guide/v42/"
        "4-Web_Application_Security_Testing/09-Testing_for_Weak_Cryptography/"
        "01-Testing_for_Weak_Transport_Layer_Security",
    )

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def url(self) -> str:
        return self.value[1]

    @staticmethod
    def to_map(*tags: "CommonAlertTag") -> dict[str, str]:
        return {tag.tag: tag.url for tag in tags}


class PolicyTag(Enum):
    """Scan policy membership tags; their map value is always empty."""

    PENTEST = "PENTEST"
    QA_STD = "QA-STD"
    QA_FULL = "QA-FULL"

    @property
    def tag(self) -> str:
        return self.value


def put_cve(tags: dict[str, str], cve: str) -> None:
    """Add a CVE tag pointing at its NVD entry."""
    tags[cve] = CVE_REFERENCE_URL.format(cve=cve)
