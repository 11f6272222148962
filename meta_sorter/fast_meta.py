"""Reference metadata probe.

Prints the textual metadata Pillow can see in an image, one ``key: value``
per entry, and exits non-zero when the file cannot be opened or carries no
text at all. ``meta_sorter`` only looks at this program's stdout and exit
status, so any other tool honouring the same contract can replace it.
"""

from __future__ import annotations

import sys
from pathlib import Path

from PIL import ExifTags, Image

EXIF_TEXT_TAGS = {
    ExifTags.Base.Software: "Software",
    ExifTags.Base.ImageDescription: "ImageDescription",
    ExifTags.Base.Make: "Make",
}

# Byte-valued info entries that carry text; everything else (icc_profile,
# photoshop, transparency, ...) is binary.
TEXT_BYTE_KEYS = frozenset({"comment", "xmp", "XML:com.adobe.xmp"})
BINARY_KEYS = frozenset({"exif", "icc_profile", "photoshop", "transparency", "adobe", "iptc"})

EXIT_OK = 0
EXIT_NO_METADATA = 1


def _as_text(value: object) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        # EXIF UserComment carries an 8-byte charset header.
        if value[:8] in (b"UNICODE\x00", b"ASCII\x00\x00\x00", b"\x00" * 8):
            head, body = value[:8], value[8:]
            if head == b"UNICODE\x00":
                encoding = "utf-16-be" if body[:1] == b"\x00" else "utf-16-le"
                return body.decode(encoding, errors="replace").rstrip("\x00")
            return body.decode("utf-8", errors="replace").rstrip("\x00")
        return value.decode("utf-8", errors="replace").rstrip("\x00")
    return None


def extract_lines(path: Path) -> list[str]:
    lines: list[str] = []
    with Image.open(path) as img:
        for key, value in img.info.items():
            if key in BINARY_KEYS:
                continue
            if isinstance(value, bytes) and key not in TEXT_BYTE_KEYS:
                continue
            text = _as_text(value)
            if text:
                lines.append(f"{key}: {text}")

        exif = img.getexif()
        for tag, name in EXIF_TEXT_TAGS.items():
            text = _as_text(exif.get(tag))
            if text:
                lines.append(f"{name}: {text}")

        comment = _as_text(exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.UserComment))
        if comment:
            lines.append(f"UserComment: {comment}")
    return lines


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("usage: fast_meta <image>", file=sys.stderr)
        return 2

    try:
        lines = extract_lines(Path(args[0]))
    except Exception as exc:  # noqa: BLE001
        print(f"fast_meta: {exc}", file=sys.stderr)
        return EXIT_NO_METADATA

    if not lines:
        return EXIT_NO_METADATA

    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")
    print("\n".join(lines))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
