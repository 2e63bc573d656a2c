# backend/fitkeeper/services/durations.py
from typing import Optional


def _part(value: str) -> int:
    # leading digits only, like parseInt: "07s" -> 7, "" -> 0
    digits = ""
    for ch in value.strip():
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits else 0


def parse_video_duration(duration: Optional[str]) -> int:
    """
    Parse a card's video_duration string into seconds.

      "27:30:00" -> 1650   minutes:seconds:00
      "1:30:15"  -> 5415   hours:minutes:seconds
      "75:00:10" -> 270010 hours:minutes:seconds
      "1:27"     -> 87     minutes:seconds
      "45"       -> 45     seconds

    Older catalog rows store minutes:seconds padded with a trailing ":00".
    A three-part value is read that way when its first part is below 60 and
    its last part is zero; anything else is hours:minutes:seconds.

    The older reader treated every three-part value with a first part below 60
    as minutes:seconds and dropped the third part, so "5:30:15" was 330 there.
    Here it is 19815: a non-zero third part is only meaningful as seconds.
    """
    if not duration:
        return 0
    parts = [_part(p) for p in str(duration).split(":")]

    if len(parts) == 3:
        first, second, third = parts
        if first < 60 and third == 0:
            return first * 60 + second
        return first * 3600 + second * 60 + third
    if len(parts) == 2:
        return parts[0] * 60 + parts[1]
    if len(parts) == 1:
        return parts[0]
    return 0


def format_seconds(seconds: Optional[int]) -> str:
    """1650 -> "27:30"; 0 / None -> "0:00"."""
    if not seconds:
        return "0:00"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"
