import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./distro_couple.db")
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

CANDIDATE_LIMIT = int(os.getenv("CANDIDATE_LIMIT", "20"))
PROFILE_FETCH_TIMEOUT_SECONDS = float(os.getenv("PROFILE_FETCH_TIMEOUT_SECONDS", "5"))

# "elapsed" counts whole years using month/day; "calendar_year" subtracts birth year only.
AGE_MODE = os.getenv("AGE_MODE", "elapsed").strip().lower()

GENDER_MALE = "erkek"
GENDER_FEMALE = "kadin"
GENDER_ALIASES: dict[str, str] = {
    "erkek": GENDER_MALE,
    "kadin": GENDER_FEMALE,
    "kadın": GENDER_FEMALE,
    "male": GENDER_MALE,
    "female": GENDER_FEMALE,
}

POPULAR_DISTROS = [
    "Windows 11", "Windows 10", "Windows 8.1", "Windows 7",
    "Ubuntu", "Fedora", "Arch Linux", "Debian", "Manjaro", "Linux Mint", "EndeavourOS", "Pop!_OS", "Zorin OS",
    "elementary OS", "Kali Linux", "CentOS", "openSUSE", "Garuda Linux", "Solus", "Gentoo", "Void Linux", "NixOS",
    "Pardus", "Red Hat Enterprise Linux",
]
