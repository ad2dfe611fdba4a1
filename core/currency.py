def _group_indian(digits):
    # last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_rupees(amount):
    """Format an amount the way the en-IN locale does, e.g. ₹1,23,456.5"""
    sign = "-" if amount < 0 else ""
    whole, paise = divmod(int(round(abs(amount) * 100)), 100)
    text = _group_indian(str(whole))
    if paise:
        text += f".{paise:02d}".rstrip("0")
    return f"{sign}₹{text}"
