# tests/test_prefer_stateless_function.py
"""
Conformance cases for the prefer-stateless-function rule: which component
definitions are flagged as convertible to pure functions and which are not.
"""

import pytest

from stateless_lint.ast_helper import parse_module
from stateless_lint.checkers import CheckerRunner, PreferStatelessFunctionChecker
from stateless_lint.config import Configuration
from stateless_lint.rules import Reason, VerdictKind, classify_module
from tests.conftest import single_verdict, verdicts_for


def _flagged(source, **options):
    module = parse_module(source, "Foo.jsx")
    results = CheckerRunner(config=Configuration(**options)).run(module)
    return [d for d in results.diagnostics if d.error_id == "prefer-stateless-function"]


# ---------------------------------------------------------------------------
# Not flagged
# ---------------------------------------------------------------------------

VALID = [
    pytest.param(
        """
        const Foo = function(props) {
          return <div>{props.foo}</div>;
        };
        """,
        {},
        id="already-a-function",
    ),
    pytest.param(
        "const Foo = ({foo}) => <div>{foo}</div>;",
        {},
        id="already-an-arrow",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          shouldComponentUpdate() {
            return false;
          }
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="lifecycle-method",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          changeState() {
            this.setState({foo: "clicked"});
          }
          render() {
            return <div onClick={this.changeState.bind(this)}>{this.state.foo || "bar"}</div>;
          }
        }
        """,
        {},
        id="local-state",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          doStuff() {
            this.refs.foo.style.backgroundColor = "red";
          }
          render() {
            return <div ref="foo" onClick={this.doStuff}>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="refs",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          doStuff() {}
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="additional-method",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          constructor() {
            doSpecialStuffs();
          }
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="constructor-with-work",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          constructor() {
            foo;
          }
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="constructor-with-statement",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return <div>{this.bar}</div>;
          }
        }
        """,
        {},
        id="this-bar",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            let {props:{foo}, bar} = this;
            return <div>{foo}</div>;
          }
        }
        """,
        {},
        id="this-bar-destructured",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return <div>{this[bar]}</div>;
          }
        }
        """,
        {},
        id="this-computed",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return <div>{this['bar']}</div>;
          }
        }
        """,
        {},
        id="this-literal-bar",
    ),
    pytest.param(
        """
        export default (Component) => (
          class Test extends React.Component {
            componentDidMount() {}
            render() {
              return <Component />;
            }
          }
        );
        """,
        {},
        id="higher-order-with-lifecycle",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return <div>{this.props.children}</div>;
          }
        }
        Foo.childContextTypes = {
          color: PropTypes.string
        };
        """,
        {},
        id="external-child-context-types",
    ),
    pytest.param(
        """
        @foo
        class Foo extends React.Component {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="decorator",
    ),
    pytest.param(
        """
        @foo("bar")
        class Foo extends React.Component {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="called-decorator",
    ),
    pytest.param(
        """
        @foo
        @bar()
        class Foo extends React.Component {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="multiple-decorators",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            if (!this.props.foo) {
              return null;
            }
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {"react_version": "0.14.0"},
        id="return-null-react-0.14",
    ),
    pytest.param(
        """
        var Foo = createReactClass({
          render: function() {
            if (!this.props.foo) {
              return null;
            }
            return <div>{this.props.foo}</div>;
          }
        });
        """,
        {"react_version": "0.14.0"},
        id="factory-return-null-react-0.14",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return true ? <div /> : null;
          }
        }
        """,
        {"react_version": "0.14.0"},
        id="conditional-null-react-0.14",
    ),
    pytest.param(
        """
        class Foo extends Mystery {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="unknown-base",
    ),
    pytest.param(
        """
        var Foo = createReactClass({
          mixins: [Something],
          render: function() {
            return <div>{this.props.foo}</div>;
          }
        });
        """,
        {},
        id="factory-with-mixins",
    ),
]


@pytest.mark.parametrize("source,options", VALID)
def test_not_flagged(source, options):
    assert _flagged(source, **options) == []


# ---------------------------------------------------------------------------
# Flagged
# ---------------------------------------------------------------------------

INVALID = [
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="only-props",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return <div>{this['props'].foo}</div>;
          }
        }
        """,
        {},
        id="only-literal-props",
    ),
    pytest.param(
        """
        class Foo extends React.PureComponent {
          render() {
            return <div>foo</div>;
          }
        }
        """,
        {"ignore_pure_components": True},
        id="pure-component-no-data-ignored",
    ),
    pytest.param(
        """
        class Foo extends React.PureComponent {
          render() {
            return <div>foo</div>;
          }
        }
        """,
        {},
        id="pure-component-without-external-data",
    ),
    pytest.param(
        """
        var React = require('react');
        class Foo extends React.Component {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="commonjs-require",
    ),
    pytest.param(
        """
        class Foo extends React.PureComponent {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="pure-component-reading-props",
    ),
    pytest.param(
        """
        class Foo extends React.PureComponent {
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {"ignore_pure_components": True},
        id="pure-component-reading-props-ignored",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          static get displayName() {
            return 'Foo';
          }
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="display-name-getter",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          static displayName = 'Foo';
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="display-name-field",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          static get propTypes() {
            return {
              name: PropTypes.string
            };
          }
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="prop-types-getter",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          static propTypes = {
            name: PropTypes.string
          };
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="prop-types-field",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          props;
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="props-declaration",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          constructor() {
            super();
          }
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="useless-constructor",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          constructor() {}
          render() {
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="empty-constructor",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            let {props:{foo}, context:{bar}} = this;
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="destructured-props-and-context",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            if (!this.props.foo) {
              return null;
            }
            return <div>{this.props.foo}</div>;
          }
        }
        """,
        {},
        id="return-null",
    ),
    pytest.param(
        """
        var Foo = createReactClass({
          render: function() {
            if (!this.props.foo) {
              return null;
            }
            return <div>{this.props.foo}</div>;
          }
        });
        """,
        {},
        id="factory-return-null",
    ),
    pytest.param(
        """
        class Foo extends React.Component {
          render() {
            return true ? <div /> : null;
          }
        }
        """,
        {},
        id="conditional-null",
    ),
    pytest.param(
        """
        var Foo = React.createClass({
          displayName: 'Foo',
          propTypes: {},
          render() {
            return <div>{this.props.foo}</div>;
          }
        });
        """,
        {},
        id="pragma-create-class",
    ),
]


@pytest.mark.parametrize("source,options", INVALID)
def test_flagged(source, options):
    found = _flagged(source, **options)
    assert len(found) == 1
    assert found[0].message == PreferStatelessFunctionChecker.MESSAGE
    assert found[0].message == "Component should be written as a pure function"


# ---------------------------------------------------------------------------
# Acceptance scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    def test_plain_render_reading_props_is_candidate(self):
        verdict = single_verdict("""
            class Foo extends React.Component {
              render() { return <div>{this.props.foo}</div>; }
            }
        """)
        assert verdict.kind is VerdictKind.PURE_CANDIDATE
        assert verdict.reasons == ()

    def test_lifecycle_member_disqualifies(self):
        verdict = single_verdict("""
            class Foo extends React.Component {
              shouldComponentUpdate() { return false; }
              render() { return <div>{this.props.foo}</div>; }
            }
        """)
        assert verdict.kind is VerdictKind.DISQUALIFIED
        assert verdict.reason is Reason.LIFECYCLE_MEMBER

    def test_pure_base_with_ignore_option_is_candidate(self):
        verdict = single_verdict("""
            class Foo extends React.PureComponent {
              render() { return <div>{this.context.foo}</div>; }
            }
        """, ignore_pure_components=True)
        assert verdict.kind is VerdictKind.PURE_CANDIDATE

    def test_unknown_self_member_disqualifies(self):
        verdict = single_verdict("""
            class Foo extends React.Component {
              render() { return <div>{this.bar}</div>; }
            }
        """)
        assert verdict.kind is VerdictKind.DISQUALIFIED
        assert verdict.reason is Reason.UNRESOLVABLE_SELF_MEMBER

    def test_decorator_disqualifies_unconditionally(self):
        verdict = single_verdict("""
            @observer
            class Foo extends React.Component {
              render() { return <div>{this.props.foo}</div>; }
            }
        """)
        assert verdict.kind is VerdictKind.DISQUALIFIED
        assert verdict.reason is Reason.DECORATED


class TestVerdictProperties:

    def test_every_definition_gets_exactly_one_verdict(self):
        verdicts = verdicts_for("""
            class A extends React.Component {
              render() { return <div>{this.props.a}</div>; }
            }
            class B extends React.Component {
              render() { return <div>{this.state.b}</div>; }
            }
            const C = createReactClass({
              render() { return <span />; }
            });
        """)
        assert [v.name for v in verdicts] == ["A", "B", "C"]
        assert [v.is_pure_candidate for v in verdicts] == [True, False, True]

    def test_child_context_takes_precedence(self):
        verdict = single_verdict("""
            class Foo extends React.Component {
              static childContextTypes = {};
              componentDidMount() {}
              render() { return <div>{this.state.x}</div>; }
            }
        """)
        assert verdict.reason is Reason.CHILD_CONTEXT
        assert Reason.LIFECYCLE_MEMBER in verdict.reasons
        assert Reason.LOCAL_STATE in verdict.reasons

    def test_missing_render_disqualifies(self):
        verdict = single_verdict("""
            class Foo extends React.Component {
              static propTypes = {};
            }
        """)
        assert verdict.reason is Reason.MISSING_RENDER

    @pytest.mark.parametrize("ignore", [False, True])
    def test_pure_base_without_data_is_judged_like_component(self, ignore):
        source = """
            class Foo extends React.%s {
              render() { return <div />; }
            }
        """
        pure = single_verdict(source % "PureComponent", ignore_pure_components=ignore)
        plain = single_verdict(source % "Component", ignore_pure_components=ignore)
        assert pure.kind is plain.kind is VerdictKind.PURE_CANDIDATE
        assert pure.reasons == plain.reasons == ()

    def test_ignore_option_never_adds_reports(self):
        source = """
            class Foo extends React.PureComponent {
              render() { return <div>{this.state.x}</div>; }
            }
        """
        assert _flagged(source) == _flagged(source, ignore_pure_components=True) == []
        verdict = single_verdict(source, ignore_pure_components=True)
        assert verdict.reasons == (Reason.LOCAL_STATE,)

    def test_null_return_below_threshold_disqualifies(self):
        verdict = single_verdict("""
            class Foo extends React.Component {
              render() { return this.props.foo ? <div /> : null; }
            }
        """, react_version="0.14.0")
        assert verdict.kind is VerdictKind.DISQUALIFIED
        assert verdict.reasons == (Reason.NULL_RETURN_UNSUPPORTED,)
        assert "15.0.0" in verdict.notes[0]

    def test_classification_is_idempotent(self):
        module = parse_module(
            """
            class A extends React.Component {
              render() { return <div>{this.props.a}</div>; }
            }
            class B extends React.PureComponent {
              componentDidMount() {}
              render() { return this.state.b ? null : <i />; }
            }
            """,
            "Foo.jsx",
        )
        config = Configuration(react_version="0.14.0")
        first = [verdict for _, verdict in classify_module(module, config)]
        second = [verdict for _, verdict in classify_module(module, config)]
        assert first == second
        assert [v.kind for v in first] == [VerdictKind.PURE_CANDIDATE, VerdictKind.DISQUALIFIED]

    def test_destructuring_matches_member_access(self):
        destructured = single_verdict("""
            class Foo extends React.Component {
              render() {
                const {props: {foo}} = this;
                return use(foo);
              }
            }
        """)
        direct = single_verdict("""
            class Foo extends React.Component {
              render() {
                return use(this.props.foo);
              }
            }
        """)
        assert destructured.finding.tags == direct.finding.tags
        assert destructured.kind is direct.kind is VerdictKind.PURE_CANDIDATE
        assert destructured.reasons == direct.reasons == ()

    def test_verdicts_follow_source_order(self):
        verdicts = verdicts_for("""
            function make() {
              return class Inner extends React.Component {
                render() { return <i />; }
              };
            }
            class Outer extends React.Component {
              render() { return <b />; }
            }
        """)
        assert [v.name for v in verdicts] == ["Inner", "Outer"]
        assert verdicts[0].location.line < verdicts[1].location.line
