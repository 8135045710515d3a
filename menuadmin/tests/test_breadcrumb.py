import pytest

from menuadmin.core.navigation.breadcrumb import (
    BreadcrumbContext,
    BreadcrumbItem,
    render_breadcrumb,
    use_breadcrumb,
)


@pytest.mark.unit
def test_initial_trail_is_empty_and_renders_nothing():
    ctx = BreadcrumbContext()
    assert ctx.breadcrumb_items == ()
    assert ctx.render() == []


@pytest.mark.unit
def test_update_keeps_order_and_marks_last_active():
    ctx = BreadcrumbContext()
    ctx.update_breadcrumb([BreadcrumbItem("A"), BreadcrumbItem("B")])
    assert [item.label for item in ctx.breadcrumb_items] == ["A", "B"]
    rendered = ctx.render()
    assert [crumb.active for crumb in rendered] == [False, True]
    assert rendered[1].label == "B"


@pytest.mark.unit
def test_update_with_empty_list_clears_trail():
    ctx = BreadcrumbContext()
    ctx.update_breadcrumb([BreadcrumbItem("A")])
    ctx.update_breadcrumb([])
    assert ctx.breadcrumb_items == ()
    assert render_breadcrumb(ctx.breadcrumb_items) == []


@pytest.mark.unit
def test_update_function_is_stable():
    ctx = BreadcrumbContext()
    update = ctx.update_breadcrumb
    ctx.update_breadcrumb([BreadcrumbItem("A")])
    assert ctx.update_breadcrumb is update


@pytest.mark.unit
def test_equal_input_does_not_bump_version():
    ctx = BreadcrumbContext()
    items = [BreadcrumbItem("Dashboard", link="/admin/dashboard"), BreadcrumbItem("Orders")]
    ctx.update_breadcrumb(items)
    version = ctx.version
    ctx.update_breadcrumb(items)
    ctx.update_breadcrumb(list(items))
    assert ctx.version == version


@pytest.mark.unit
def test_clickable_items_and_inactive_last_node():
    calls = []

    def go_dashboard():
        calls.append(1)
        return "/admin/dashboard"

    rendered = render_breadcrumb(
        [
            BreadcrumbItem("Dashboard", on_click=go_dashboard),
            BreadcrumbItem("Menu"),
            BreadcrumbItem("Category", link="/admin/menu/category", on_click=go_dashboard),
        ]
    )
    assert rendered[0].clickable and rendered[0].href == "/admin/dashboard"
    assert not rendered[1].clickable
    assert rendered[2].active and not rendered[2].clickable and rendered[2].href is None
    assert calls == [1]


@pytest.mark.unit
def test_link_takes_precedence_over_on_click():
    rendered = render_breadcrumb(
        [BreadcrumbItem("Home", link="/admin/", on_click=lambda: "/elsewhere"), BreadcrumbItem("Here")]
    )
    assert rendered[0].href == "/admin/"


@pytest.mark.unit
def test_use_breadcrumb_requires_provider():
    with pytest.raises(RuntimeError):
        use_breadcrumb()


@pytest.mark.integration
def test_each_request_gets_a_fresh_context(app):
    with app.test_request_context("/admin/dashboard"):
        app.preprocess_request()
        first = use_breadcrumb()
        first.update_breadcrumb([BreadcrumbItem("Dashboard")])
    with app.test_request_context("/admin/dashboard"):
        app.preprocess_request()
        second = use_breadcrumb()
        assert second is not first
        assert second.breadcrumb_items == ()
