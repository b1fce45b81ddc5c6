"""
Tests for the rule catalogue - each rule's callback, payload and message.
"""

import pytest

from doclint.core.config_resolver import ConfigResolver
from doclint.core.entity_registry import EntityRegistry
from doclint.core.execution.in_process import InProcessExecutor
from doclint.core.result_builder import ResultBuilder
from doclint.core.rule_registry import RULE_REGISTRY, get_rule
from doclint.core.tag_catalog import known_tags, register_tags
from doclint.errors import UnknownRuleError
from doclint.models.entity_models import DocumentableEntity, Parameter, Tag
from doclint.models.rule_models import ExecutionStrategy


def _offenses(rule_id, entities, document=None):
    rule = get_rule(rule_id)
    config = ConfigResolver(document)
    stdout = InProcessExecutor(EntityRegistry(entities), config).execute(rule).stdout
    return ResultBuilder(config).build(rule.parser.parse(stdout), rule)


def _method(path="Foo#bar", **kwargs):
    kwargs.setdefault("file", "lib/foo.rb")
    kwargs.setdefault("line", 5)
    kwargs.setdefault("visibility", "public")
    return DocumentableEntity(path=path, **kwargs)


# ── Registry ──


def test_registry_is_ordered_by_id():
    assert list(RULE_REGISTRY) == sorted(RULE_REGISTRY)
    assert len(RULE_REGISTRY) == 16


def test_every_rule_is_complete():
    for rule in RULE_REGISTRY.values():
        assert rule.parser is not None, rule.id
        assert rule.message_builder is not None, rule.id
        assert rule.default_severity is not None, rule.id
        if rule.strategy is ExecutionStrategy.IN_PROCESS:
            assert callable(rule.query), rule.id
        else:
            assert rule.query is None or isinstance(rule.query, str), rule.id


def test_get_rule_unknown():
    with pytest.raises(UnknownRuleError):
        get_rule("Documentation/Nothing")


# ── Documentation/UndocumentedObjects ──


def test_undocumented_objects():
    offenses = _offenses(
        "Documentation/UndocumentedObjects",
        [
            _method("Foo#documented", docstring="Does things"),
            _method("Foo#tagged", tags=[Tag(name="return", types=["String"])]),
            _method("Foo#bare", line=12),
        ],
    )
    assert [o.message for o in offenses] == ["Documentation required for `Foo#bare`"]
    assert offenses[0].location_line == 12
    assert offenses[0].severity == "warning"


def test_undocumented_objects_excluded_methods_by_arity():
    entities = [
        _method("Foo#initialize"),
        _method("Bar#initialize", parameters=[Parameter(name="x")]),
    ]
    offenses = _offenses("Documentation/UndocumentedObjects", entities)
    assert [o.object_name for o in offenses] == ["Bar#initialize"]

    offenses = _offenses(
        "Documentation/UndocumentedObjects",
        entities,
        {"Documentation/UndocumentedObjects": {"excluded_methods": ["initialize"]}},
    )
    assert offenses == []


# ── Documentation/UndocumentedMethodArguments ──


def test_undocumented_method_arguments():
    entity = _method(
        docstring="Bar",
        parameters=[Parameter(name="a"), Parameter(name="*rest"), Parameter(name="&block")],
        tags=[Tag(name="param", param_name="a")],
    )
    offenses = _offenses("Documentation/UndocumentedMethodArguments", [entity])
    assert len(offenses) == 1
    assert offenses[0].message == (
        "The `Foo#bar` method is missing documentation for some of the arguments: "
        "`rest`, `block`."
    )
    assert offenses[0].category == "method"


def test_documented_arguments_pass():
    entity = _method(
        parameters=[Parameter(name="a")],
        tags=[Tag(name="param", param_name="a")],
    )
    assert _offenses("Documentation/UndocumentedMethodArguments", [entity]) == []


# ── Documentation/BlankLineBeforeDefinition ──


def test_blank_line_before_definition(sample_entities):
    offenses = _offenses("Documentation/BlankLineBeforeDefinition", sample_entities)
    by_name = {o.object_name: o for o in offenses}

    assert set(by_name) == {"User#name", "User#email"}
    assert by_name["User#name"].violation_type == "single"
    assert by_name["User#name"].severity == "convention"
    assert by_name["User#email"].violation_type == "orphaned"
    assert by_name["User#email"].blank_count == 2
    assert by_name["User#email"].message == (
        "Documentation is orphaned (ignored due to blank lines) for 'User#email' (2 blank lines)"
    )


def test_blank_line_subtype_severities_and_patterns(sample_entities):
    document = {
        "Documentation/BlankLineBeforeDefinition": {
            "single_severity": "error",
            "enabled_patterns": {"orphaned_docs": False},
        }
    }
    offenses = _offenses("Documentation/BlankLineBeforeDefinition", sample_entities, document)
    assert [(o.object_name, o.severity) for o in offenses] == [("User#name", "error")]


# ── Tags/Order ──


def test_tags_order():
    entity = _method(
        tags=[
            Tag(name="return", types=["String"]),
            Tag(name="param", param_name="a"),
            Tag(name="param", param_name="b"),
        ]
    )
    offenses = _offenses("Tags/Order", [entity])
    assert len(offenses) == 1
    assert offenses[0].name == "InvalidTagsOrder"
    assert "`param`, `return`" in offenses[0].message


def test_tags_order_custom_order_and_repeats():
    entity = _method(
        tags=[Tag(name="param"), Tag(name="param"), Tag(name="return"), Tag(name="example")]
    )
    assert _offenses("Tags/Order", [entity]) == []

    document = {"Tags/Order": {"enforced_order": ["return", "param"]}}
    assert len(_offenses("Tags/Order", [entity], document)) == 1


# ── Tags/ForbiddenTags ──


def test_forbidden_tags():
    document = {
        "Tags/ForbiddenTags": {
            "enabled": True,
            "forbidden_patterns": [
                {"tag": "return", "types": ["void"]},
                {"tag": "author"},
            ],
        }
    }
    entity = _method(
        tags=[
            Tag(name="return", types=["void"]),
            Tag(name="return", types=["String"]),
            Tag(name="author", text="someone"),
        ]
    )
    messages = [o.message for o in _offenses("Tags/ForbiddenTags", [entity], document)]
    assert messages == [
        "Forbidden tag pattern detected: @return [void]. Type(s) 'void' are not allowed for @return.",
        "Forbidden tag detected: @author. This tag is not allowed by project configuration.",
    ]


# ── Tags/ApiTags ──


def test_api_tags():
    entities = [
        _method("Foo#ok", tags=[Tag(name="api", text="public")]),
        _method("Foo#bad", tags=[Tag(name="api", text="semi")]),
        _method("Foo#none"),
        _method("Foo#hidden", visibility="private"),
    ]
    offenses = _offenses("Tags/ApiTags", entities)
    messages = [o.message for o in offenses]
    assert messages == [
        "Object `Foo#bad` has invalid @api tag value 'semi'. Allowed values: public, private, internal",
        "Public object `Foo#none` is missing @api tag",
    ]


def test_api_tags_not_required():
    document = {"Tags/ApiTags": {"require_api_tags": False}}
    assert _offenses("Tags/ApiTags", [_method("Foo#none")], document) == []


# ── Semantic/AbstractMethods ──


def test_abstract_methods():
    abstract = [Tag(name="abstract")]
    entities = [
        _method("A#ok", tags=abstract, source="def ok\n  raise NotImplementedError\nend"),
        _method("A#py", tags=abstract, source="def py(self):\n    \"\"\"Docs.\"\"\"\n    ..."),
        _method("A#bad", tags=abstract, source="def bad\n  compute(1)\nend"),
        _method("A#plain", source="def plain\n  compute(1)\nend"),
    ]
    offenses = _offenses("Semantic/AbstractMethods", entities)
    assert [o.object_name for o in offenses] == ["A#bad"]
    assert offenses[0].name == "AbstractMethodWithImplementation"


# ── Warnings/* ──


def test_unknown_tag_suggestion():
    rule = get_rule("Warnings/UnknownTag")
    message = rule.message_builder({"message": "Unknown tag @exmaple"})
    assert message == "Unknown tag @exmaple (did you mean '@example'?)"


def test_unknown_tag_suggestion_uses_registered_tags():
    rule = get_rule("Warnings/UnknownTag")
    assert "reviewer" not in known_tags()

    register_tags(["@reviewer"])
    assert "reviewer" in known_tags()
    assert rule.message_builder({"message": "Unknown tag @reviewr"}) == (
        "Unknown tag @reviewr (did you mean '@reviewer'?)"
    )


def test_unknown_tag_without_close_match():
    rule = get_rule("Warnings/UnknownTag")
    assert rule.message_builder({"message": "Unknown tag @zzzzzz"}) == "Unknown tag @zzzzzz"


def test_unknown_directive_suggestion():
    rule = get_rule("Warnings/UnknownDirective")
    message = rule.message_builder({"message": "Unknown directive @!mehtod"})
    assert message == "Unknown directive @!mehtod (did you mean '@!method'?)"


def test_parameter_name_messages_fall_back():
    assert get_rule("Warnings/UnknownParameterName").message_builder({}) == (
        "UnknownParameterName detected"
    )
    assert get_rule("Warnings/DuplicatedParameterName").message_builder(
        {"message": "@param tag has duplicate parameter name: x"}
    ) == "@param tag has duplicate parameter name: x"


# ── Tags/OptionTags ──


def test_option_tags():
    offenses = _offenses(
        "Tags/OptionTags",
        [
            _method(
                "Foo#configure",
                parameters=[Parameter(name="name"), Parameter(name="options", default="{}")],
            ),
            _method("Foo#call", line=9, parameters=[Parameter(name="**opts")]),
            _method(
                "Foo#documented",
                line=15,
                parameters=[Parameter(name="options")],
                tags=[Tag(name="option", param_name="options", text=":timeout")],
            ),
            _method("Foo#plain", line=20, parameters=[Parameter(name="value")]),
            _method(
                "Foo#hidden", line=25, visibility="private", parameters=[Parameter(name="opts")]
            ),
        ],
    )
    assert [o.object_name for o in offenses] == ["Foo#configure", "Foo#call", "Foo#hidden"]
    assert offenses[0].name == "MissingOptionTags"
    assert offenses[0].severity == "warning"
    assert offenses[0].message == (
        "Method `Foo#configure` has options parameter but no @option tags "
        "documenting the available options"
    )


def test_option_tags_parameter_names_are_configurable():
    entities = [_method(parameters=[Parameter(name="settings")])]
    assert _offenses("Tags/OptionTags", entities) == []

    document = {"Tags/OptionTags": {"parameter_names": ["settings"]}}
    assert len(_offenses("Tags/OptionTags", entities, document)) == 1


# ── Documentation/UndocumentedOptions ──


def test_undocumented_options():
    offenses = _offenses(
        "Documentation/UndocumentedOptions",
        [
            _method(
                "Foo#configure",
                parameters=[Parameter(name="name"), Parameter(name="opt", default="{}")],
            ),
            _method("Foo#call", line=9, parameters=[Parameter(name="**rest")]),
            _method(
                "Foo#hidden", line=25, visibility="private", parameters=[Parameter(name="opts")]
            ),
            _method("Foo#plain", line=30, parameters=[Parameter(name="optional")]),
        ],
    )
    assert [o.object_name for o in offenses] == ["Foo#configure", "Foo#call"]
    assert offenses[0].params == "name, opt {}"
    assert offenses[0].message == (
        "Method 'Foo#configure' has options parameter (name, opt {}) "
        "but no @option tags in documentation."
    )


# ── Warnings/InvalidTagFormat, Warnings/InvalidDirectiveFormat ──


@pytest.mark.parametrize(
    "rule_id,raw,message",
    [
        (
            "Warnings/InvalidTagFormat",
            "[warn]: Invalid tag format for @example in file `lib/a.rb` near line 12",
            "Invalid tag format for @example",
        ),
        (
            "Warnings/InvalidDirectiveFormat",
            "[warn]: Invalid directive format for @!macro in file `lib/a.rb` near line 4",
            "Invalid directive format for @!macro",
        ),
    ],
)
def test_format_warnings(rule_id, raw, message):
    rule = get_rule(rule_id)
    offenses = ResultBuilder(ConfigResolver()).build(rule.parser.parse(raw), rule)
    assert [(o.severity, o.location, o.message) for o in offenses] == [
        ("error", "lib/a.rb", message)
    ]
