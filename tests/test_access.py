# tests/test_access.py
"""
Tests for instance-access detection inside render.
"""

import pytest

from stateless_lint.access import (
    EMPTY_FINDING,
    CapabilityTag,
    InstanceAccessDetector,
    detect_instance_access,
)
from tests.conftest import render_of

T = CapabilityTag


def _detect(render_body):
    source = f"class Foo extends Component {{ render() {{ {render_body} }} }}"
    return detect_instance_access(render_of(source), "Foo.jsx")


class TestNamespaceRoots:

    @pytest.mark.parametrize("body,tag", [
        ("return this.props.a;", T.READS_INPUT_DATA),
        ("return this.context.a;", T.READS_SHARED_CONTEXT),
        ("return this.state.a;", T.READS_OR_WRITES_LOCAL_STATE),
        ("this.setState({a: 1}); return null;", T.READS_OR_WRITES_LOCAL_STATE),
        ("this.forceUpdate(); return null;", T.READS_OR_WRITES_LOCAL_STATE),
        ("this.replaceState({}); return null;", T.READS_OR_WRITES_LOCAL_STATE),
        ("return this.refs.input;", T.USES_HOST_HANDLE),
        ("return this.helper();", T.USES_UNRESOLVABLE_SELF_MEMBER),
    ])
    def test_member_access(self, body, tag):
        assert _detect(body).tags == frozenset({tag})

    def test_literal_subscript(self):
        assert _detect("return this['props'].a;").tags == frozenset({T.READS_INPUT_DATA})
        assert _detect("return this[`state`];").tags == frozenset({T.READS_OR_WRITES_LOCAL_STATE})

    def test_computed_subscript_is_unresolvable(self):
        assert _detect("return this[key];").tags == frozenset({T.USES_UNRESOLVABLE_SELF_MEMBER})

    def test_parenthesised_self(self):
        assert _detect("return (this).props.a;").tags == frozenset({T.READS_INPUT_DATA})

    def test_no_access(self):
        finding = _detect("return <div />;")
        assert finding.tags == frozenset()
        assert not finding.reads_external_data


class TestDestructuring:

    def test_declaration(self):
        finding = _detect("const {props: {a}, context} = this; return a;")
        assert finding.tags == frozenset({T.READS_INPUT_DATA, T.READS_SHARED_CONTEXT})
        assert finding.reads_external_data

    def test_assignment(self):
        finding = _detect("let state; ({state} = this); return state;")
        assert finding.tags == frozenset({T.READS_OR_WRITES_LOCAL_STATE})

    def test_default_value(self):
        assert _detect("const {props = {}} = this; return props;").tags == frozenset({T.READS_INPUT_DATA})

    def test_unknown_key(self):
        assert T.USES_UNRESOLVABLE_SELF_MEMBER in _detect("const {bar} = this; return bar;").tags

    def test_rest_pattern(self):
        tags = _detect("const {props, ...rest} = this; return rest;").tags
        assert T.USES_UNRESOLVABLE_SELF_MEMBER in tags

    def test_plain_alias_escapes(self):
        assert _detect("const self = this; return self.props.a;").tags == frozenset(
            {T.USES_UNRESOLVABLE_SELF_MEMBER}
        )


class TestEscapesAndScopes:

    def test_self_passed_as_argument(self):
        assert _detect("return register(this);").tags == frozenset({T.USES_UNRESOLVABLE_SELF_MEMBER})

    def test_nested_function_is_scanned(self):
        finding = _detect("return <button onClick={() => this.setState({x: 1})} />;")
        assert T.READS_OR_WRITES_LOCAL_STATE in finding.tags

    def test_nested_class_is_skipped(self):
        body = "class Inner { method() { return this.state; } } return <div>{this.props.a}</div>;"
        assert _detect(body).tags == frozenset({T.READS_INPUT_DATA})

    def test_jsx_ref_attribute(self):
        finding = _detect("return <input ref={node => { window.x = node; }} />;")
        assert T.USES_HOST_HANDLE in finding.tags
        assert finding.sites_for(T.USES_HOST_HANDLE)[0].path == "ref"

    def test_arrow_render_field(self):
        render = render_of("class Foo extends Component { render = () => <div>{this.props.a}</div>; }")
        assert detect_instance_access(render).tags == frozenset({T.READS_INPUT_DATA})


class TestEvidence:

    def test_sites_carry_locations(self):
        source = """
            class Foo extends Component {
              render() {
                return <div>{this.props.a}{this.state.b}</div>;
              }
            }
        """
        finding = InstanceAccessDetector("Foo.jsx").detect(render_of(source))
        paths = [s.path for s in finding.sites]
        assert paths == ["this.props", "this.state"]
        assert all(s.location.file == "Foo.jsx" for s in finding.sites)
        assert all(s.location.line == 4 for s in finding.sites)

    def test_missing_render(self):
        assert InstanceAccessDetector().detect(None) is EMPTY_FINDING
