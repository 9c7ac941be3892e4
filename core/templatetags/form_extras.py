from django import template

from core.completion import lookup

register = template.Library()


@register.filter
def form_field(form, name):
    """
    Return a BoundField from a form by field name, e.g. {{ form|form_field:"city" }}.
    Safe to use with dynamic field names in templates.
    """
    try:
        return form[name]
    except KeyError:
        return None


@register.filter
def doc(data, path):
    """
    Read a value from a profile document by dotted path,
    e.g. {{ profile.data|doc:"current_location.city" }}.
    """
    return lookup(data or {}, path)
