# Selectors for sports.bwin.com (EN/BG). Kept generic on purpose: match by
# custom element names, visible text and attributes rather than hashed classes.

# OneTrust cookie banner
COOKIE_BANNER         = "#onetrust-banner-sdk"
COOKIE_ACCEPT         = "button#onetrust-accept-btn-handler"

# Live betting: outcome "buttons" (Angular custom element)
OUTCOME_BUTTONS       = "ms-event-pick"
SELECTED_PICK         = (
    'ms-event-pick.selected, ms-event-pick.active, '
    'ms-event-pick [aria-pressed="true"], ms-event-pick[aria-pressed="true"]'
)

# A-Z sports panel
AZ_TAB                = (
    "xpath=//*[self::a or self::button or self::div or self::span]"
    "[contains(normalize-space(.),'A-Z Sports')]"
)
AZ_HEADER             = (
    "xpath=//*[self::h1 or self::h2 or self::h3 or self::div or self::span]"
    "[normalize-space(.)='A-Z Sports' or contains(normalize-space(.),'A-Z Sports')]"
)


def xpath_literal(s: str) -> str:
    if "'" not in s:
        return f"'{s}'"
    if '"' not in s:
        return f'"{s}"'
    parts = s.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def sport_by_text(name: str) -> str:
    return f"xpath=(//*[normalize-space(.)={xpath_literal(name)}])[1]"


def sport_by_href(sports_path: str, slug: str) -> str:
    return f"xpath=//a[contains(@href,{xpath_literal(sports_path + slug)})]"


def active_sport_tab(name: str) -> str:
    return (
        f"xpath=//*[normalize-space(.)={xpath_literal(name)}]"
        "[contains(@class,'active') or contains(@class,'selected') "
        "or @aria-selected='true' or self::h1 or self::h2]"
    )


# Betslip (right rail)
BETSLIP_HEADER        = (
    "xpath=//*[self::div or self::button or self::a or self::h1 or self::h2 or self::h3 or self::span]"
    "[contains(normalize-space(.),'Bet Slip') or contains(normalize-space(.),'Betslip')]"
)
BETSLIP_COUNTER       = (
    "xpath=//*[contains(normalize-space(.),'Selections (') and contains(normalize-space(.),')')]"
)
BETSLIP_ANY_ROW       = (
    "xpath=//aside//*[contains(@class,'selection') or contains(@class,'bet') or contains(@class,'row')]"
    "[.//*[self::span or self::div or self::b or self::strong]"
    "[contains(normalize-space(.),'.') or string-length(normalize-space(.))<=5]"
    " or .//*[contains(@class,'remove') or contains(@class,'close') or contains(@aria-label,'Remove')]]"
)
_LOWER = "translate({},'ABCDEFGHIJKLMNOPQRSTUVWXYZ','abcdefghijklmnopqrstuvwxyz')"
BETSLIP_TOGGLE        = "xpath=//*[" + " or ".join(
    f"contains({_LOWER.format(attr)},'betslip')"
    for attr in ("@id", "@class", "@data-test-id", "@aria-label")
) + "]"
