import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^\w.-]")


def build_report_filename(prefix: str, signer_name: str, fallback: str = "Corretor") -> str:
    """``<prefix>_<Signer_Name>.pdf``.

    Whitespace runs become ``_``; path separators and other characters that
    are not word characters, dots or dashes are dropped. Accented letters are
    kept. An empty result falls back to ``fallback``.
    """
    name = unicodedata.normalize("NFC", signer_name.strip())
    name = _UNSAFE.sub("", _WHITESPACE.sub("_", name)).strip("._")
    return f"{prefix}_{name or fallback}.pdf"
