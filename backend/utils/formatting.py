from decimal import Decimal, ROUND_DOWN

def amount_to_words(n) -> str:
    """Spell out the integer part of an amount using thousand / million / billion grouping."""
    if n is None:
        return ""
    n = int(Decimal(n))
    if n < 0:
        return "minus " + amount_to_words(-n)
    if n == 0:
        return "zero"

    ones = ["", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen", "seventeen", "eighteen", "nineteen"]
    tens = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]
    scales = ["", "thousand", "million", "billion", "trillion"]

    def convert_hundreds(num):
        words = []
        if num >= 100:
            words.append(ones[num // 100] + " hundred")
            num %= 100
        if num >= 20:
            words.append(tens[num // 10] + (" " + ones[num % 10] if num % 10 else ""))
        elif num > 0:
            words.append(ones[num])
        return " ".join(words)

    chunks = []
    scale = 0
    while n > 0:
        chunk = n % 1000
        if chunk:
            words = convert_hundreds(chunk)
            if scales[scale]:
                words += " " + scales[scale]
            chunks.insert(0, words)
        n //= 1000
        scale += 1
    return " ".join(chunks)

def amount_in_words(amount, currency: str = "AED") -> str:
    """e.g. 1050.5 -> 'AED one thousand fifty and 50/100 Only'."""
    amount = Decimal(amount or 0)
    whole = int(amount.to_integral_value(rounding=ROUND_DOWN))
    cents = int(((amount - whole) * 100).to_integral_value(rounding=ROUND_DOWN))
    return f"{currency} {amount_to_words(whole)} and {cents:02d}/100 Only"
