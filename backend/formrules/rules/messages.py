"""Message templates for the built-in rules.

Each template has one or two %s slots, filled in order by the field's label
and the rule's parameter. Rules without a parameter have a single slot.
"""

RULE_MESSAGES = {
    "required": "%s is required",
    "required_if": "%s is required if %s is present",
    "equals": "%s must equal %s",
    "match_regex": "%s must match pattern %s",
    "min_length": "%s must be at least %s characters long",
    "max_length": "%s must be less than %s characters",
    "exact_length": "%s must be exactly %s characters",
    "min_val": "%s must be at least %s",
    "max_val": "%s must be less than %s",
    "is_numeric": "%s must be a valid number",
    "is_int": "%s must be a valid integer",
    "is_float": "%s must be a valid decimal",
    "valid_ip": "%s must be a valid IP address",
    "valid_uri": "%s must be a valid URL",
    "valid_email": "%s is an invalid email address",
    "valid_emails": "%s must contain a valid list of email addresses",
}
