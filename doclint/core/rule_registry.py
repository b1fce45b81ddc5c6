"""
Rule Registry - Static table of every rule doclint ships.

Built once at import time; dispatch goes through this table. Order is the
rule id order and is the order rules run and report in.
"""

from __future__ import annotations

from doclint.errors import UnknownRuleError
from doclint.models.rule_models import RuleDescriptor

# Import all rule modules
from doclint.core.rules import (
    abstract_methods,
    api_tags,
    blank_line_before_definition,
    duplicated_parameter_name,
    forbidden_tags,
    invalid_directive_format,
    invalid_tag_format,
    option_tags,
    tags_order,
    undocumented_boolean_methods,
    undocumented_method_arguments,
    undocumented_objects,
    undocumented_options,
    unknown_directive,
    unknown_parameter_name,
    unknown_tag,
)

_RULES: list[RuleDescriptor] = [
    blank_line_before_definition.RULE,
    undocumented_boolean_methods.RULE,
    undocumented_method_arguments.RULE,
    undocumented_objects.RULE,
    undocumented_options.RULE,
    abstract_methods.RULE,
    api_tags.RULE,
    forbidden_tags.RULE,
    tags_order.RULE,
    option_tags.RULE,
    duplicated_parameter_name.RULE,
    invalid_directive_format.RULE,
    invalid_tag_format.RULE,
    unknown_directive.RULE,
    unknown_parameter_name.RULE,
    unknown_tag.RULE,
]

# Registry of all rules, keyed and ordered by rule id
RULE_REGISTRY: dict[str, RuleDescriptor] = {
    rule.id: rule for rule in sorted(_RULES, key=lambda rule: rule.id)
}


def get_rule(rule_id: str, registry: dict[str, RuleDescriptor] | None = None) -> RuleDescriptor:
    """Descriptor for a rule id; unknown ids are a configuration error."""
    rules = RULE_REGISTRY if registry is None else registry
    try:
        return rules[rule_id]
    except KeyError:
        raise UnknownRuleError(rule_id) from None
