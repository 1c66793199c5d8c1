from quart import current_app, has_app_context

DEFAULTS = {
    'AUTOCRUD_DOUBLE_ENCODE': True,
}
"""
Default values of the settings read from the Quart application config.

AUTOCRUD_DOUBLE_ENCODE
    Send the record created or updated by POST/PUT as a JSON string
    holding the JSON document, instead of the document itself.
"""


def get_setting(name):
    if has_app_context():
        return current_app.config.get(name, DEFAULTS[name])
    return DEFAULTS[name]
