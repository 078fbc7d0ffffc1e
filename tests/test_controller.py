"""Tests for the list-rendering pipeline."""

import asyncio
import logging

import pytest
from PyQt6.QtWidgets import QLabel

from pyqt_datalist.controllers import PipelineState
from pyqt_datalist.core import get_value_for_expr
from pyqt_datalist.errors import FetchError, RenderError, TemplateNotFoundError, ValidationError
from pyqt_datalist.protocols import DataListConfig, set_list_config
from pyqt_datalist.services import CallableTemplate, DocumentContext, LabelTemplate
from pyqt_datalist.widgets import DataListWidget


class FakeSource:
    """DataSource returning a fixed payload or raising a fixed error."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def fetch_items(self, context, host, expression_path):
        self.calls.append((host.src(), expression_path))
        if self.error is not None:
            raise self.error
        return get_value_for_expr(self.payload, expression_path)


class GatedSource:
    """DataSource whose fetches complete only when their gate is opened."""

    def __init__(self, payloads):
        self.payloads = list(payloads)
        self.gates = []

    async def fetch_items(self, context, host, expression_path):
        payload = self.payloads.pop(0)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        if isinstance(payload, Exception):
            raise payload
        return payload


def fixed_height_label(item):
    label = QLabel(item["t"])
    label.setFixedHeight(40)
    return label


def make_widget(manual_scheduler, source, fallback=True, template="row", **kwargs):
    context = DocumentContext(data_source=source, scheduler=manual_scheduler)
    context.templates.register("row", LabelTemplate("{t}"))
    widget = DataListWidget(
        context,
        src="items.json",
        template=template,
        placeholder=QLabel("Loading"),
        fallback=QLabel("Error") if fallback else None,
        **kwargs,
    )
    return widget


def texts(widget):
    return [w.text() for w in widget.container.items()]


def test_end_to_end_renders_in_order(qapp, manual_scheduler):
    """Two items render in order, one content_rendered, fallback stays hidden."""
    source = FakeSource({"items": [{"t": "a"}, {"t": "b"}]})
    widget = make_widget(manual_scheduler, source)
    events = []
    widget.content_rendered.connect(lambda: events.append(1))

    asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert texts(widget) == ["a", "b"]
    assert events == [1]
    assert source.calls == [("items.json", "items")]
    assert widget._fallback.isHidden()
    assert widget._placeholder.isHidden()
    assert widget.controller.state == PipelineState.IDLE


def test_rendered_items_get_roles(qapp, manual_scheduler):
    """Every child gets a role; roles set by the template are kept."""
    def factory(item):
        label = QLabel(item["t"])
        if item.get("role"):
            label.setProperty("role", item["role"])
        return label

    source = FakeSource({"items": [{"t": "a"}, {"t": "b", "role": "option"}]})
    widget = make_widget(manual_scheduler, source, template=CallableTemplate(factory))

    asyncio.run(widget.layout_callback())

    roles = [w.property("role") for w in widget.container.items()]
    assert roles == ["listitem", "option"]


def test_expression_path_from_host(qapp, manual_scheduler):
    """The host's items attribute selects the array."""
    source = FakeSource({"data": {"rows": [{"t": "x"}]}})
    widget = make_widget(manual_scheduler, source, items="data.rows")

    asyncio.run(widget.layout_callback())

    assert texts(widget) == ["x"]


def test_fetch_error_shows_fallback(qapp, manual_scheduler):
    """Network failure: placeholder hidden, fallback shown, FetchError raised."""
    cause = ConnectionError("network down")
    widget = make_widget(manual_scheduler, FakeSource(error=cause))

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert excinfo.value.__cause__ is cause
    assert str(excinfo.value).startswith("[DATA-LIST] Error fetching data-list")
    assert widget._placeholder.isHidden()
    assert not widget._fallback.isHidden()
    assert widget.container.items() == []


def test_fetch_error_without_fallback(qapp, manual_scheduler):
    """Without a fallback only the placeholder is hidden."""
    widget = make_widget(manual_scheduler, FakeSource(error=OSError("x")), fallback=False)

    with pytest.raises(FetchError):
        asyncio.run(widget.layout_callback())

    assert manual_scheduler.pending_count() == 1
    manual_scheduler.flush()
    assert widget._placeholder.isHidden()


def test_error_tag_follows_config(qapp, manual_scheduler):
    """The component tag in messages comes from configuration."""
    set_list_config(DataListConfig(component_tag="MY-LIST"))
    widget = make_widget(manual_scheduler, FakeSource(error=OSError("x")))

    with pytest.raises(FetchError, match=r"^\[MY-LIST\]"):
        asyncio.run(widget.layout_callback())


@pytest.mark.parametrize("value", [{"a": 1}, "text", 3, None])
def test_non_array_payload_rejected(qapp, manual_scheduler, value):
    """Non-list payloads raise ValidationError and leave the container alone."""
    source = FakeSource({"items": [{"t": "a"}]})
    widget = make_widget(manual_scheduler, source)
    asyncio.run(widget.layout_callback())

    source.payload = {"items": value}
    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(widget.controller.refresh())

    assert excinfo.value.expression_path == "items"
    assert excinfo.value.element is widget
    assert texts(widget) == ["a"]


def test_render_error_shows_fallback(qapp, manual_scheduler):
    """Template failure surfaces as RenderError with the same visuals."""
    source = FakeSource({"items": [{"t": "a"}]})
    widget = make_widget(manual_scheduler, source, template=LabelTemplate("{missing}"))

    with pytest.raises(RenderError) as excinfo:
        asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert isinstance(excinfo.value.__cause__, KeyError)
    assert widget.controller.state == PipelineState.IDLE
    assert widget._placeholder.isHidden()
    assert not widget._fallback.isHidden()


def test_missing_template(qapp, manual_scheduler):
    """An unknown template name is a render error."""
    widget = make_widget(manual_scheduler, FakeSource({"items": []}), template="nope")

    with pytest.raises(TemplateNotFoundError):
        asyncio.run(widget.layout_callback())


def test_success_after_failure_hides_fallback(qapp, manual_scheduler):
    """A later successful cycle clears the fallback shown by a failed one."""
    source = FakeSource(error=OSError("x"))
    widget = make_widget(manual_scheduler, source)
    with pytest.raises(FetchError):
        asyncio.run(widget.layout_callback())
    manual_scheduler.flush()
    assert not widget._fallback.isHidden()

    source.error = None
    source.payload = {"items": [{"t": "ok"}]}
    asyncio.run(widget.controller.refresh())
    manual_scheduler.flush()

    assert widget._fallback.isHidden()
    assert texts(widget) == ["ok"]


def test_reconcile_replaces_children(qapp, manual_scheduler):
    """Each successful cycle replaces every child."""
    source = FakeSource({"items": [{"t": "a"}, {"t": "b"}]})
    widget = make_widget(manual_scheduler, source)
    asyncio.run(widget.layout_callback())
    old = widget.container.items()

    source.payload = {"items": [{"t": "c"}]}
    asyncio.run(widget.controller.refresh())

    assert texts(widget) == ["c"]
    assert all(w.parent() is None for w in old)


def test_stale_cycle_discarded(qapp, manual_scheduler):
    """A slow earlier cycle never overwrites a later one."""
    source = GatedSource([
        {"items": [{"t": "first"}]},
        {"items": [{"t": "second"}]},
    ])
    widget = make_widget(manual_scheduler, source)
    events = []
    widget.content_rendered.connect(lambda: events.append(1))

    async def scenario():
        first = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        second = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        source.gates[1].set()
        await second
        source.gates[0].set()
        await first

    asyncio.run(scenario())

    assert texts(widget) == ["second"]
    assert events == [1]
    assert widget.controller.highest_applied_seq == 2


def test_earlier_cycle_finishing_first_is_replaced(qapp, manual_scheduler):
    """In-order completion applies both cycles; the latest wins."""
    source = GatedSource([
        {"items": [{"t": "first"}]},
        {"items": [{"t": "second"}]},
    ])
    widget = make_widget(manual_scheduler, source)

    async def scenario():
        first = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        second = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        source.gates[0].set()
        await first
        assert texts(widget) == ["first"]
        source.gates[1].set()
        await second

    asyncio.run(scenario())

    assert texts(widget) == ["second"]


def test_height_grows_when_content_taller(qapp, manual_scheduler, monkeypatch):
    """Taller content issues exactly one resize request for its height."""
    source = FakeSource({"items": [{"t": "a"}, {"t": "b"}]})
    widget = make_widget(manual_scheduler, source, template=CallableTemplate(fixed_height_label))
    widget.resize(200, 10)
    requests = []
    monkeypatch.setattr(widget, "attempt_change_height", requests.append)

    asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert requests == [80]


def test_height_unchanged_when_content_fits(qapp, manual_scheduler, monkeypatch):
    """Content that fits issues no resize request."""
    source = FakeSource({"items": [{"t": "a"}, {"t": "b"}]})
    widget = make_widget(manual_scheduler, source, template=CallableTemplate(fixed_height_label))
    widget.resize(200, 1000)
    requests = []
    monkeypatch.setattr(widget, "attempt_change_height", requests.append)

    asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert requests == []


def test_height_applied_by_host(qapp, manual_scheduler):
    """The default host grows itself to the content height."""
    source = FakeSource({"items": [{"t": "a"}, {"t": "b"}]})
    widget = make_widget(manual_scheduler, source, template=CallableTemplate(fixed_height_label))
    widget.resize(200, 10)

    asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert widget.height() == 80
    assert widget.minimumHeight() == 80


def test_layout_denied_is_swallowed(qapp, manual_scheduler, caplog):
    """A refused resize neither raises nor logs."""
    source = FakeSource({"items": [{"t": "a"}, {"t": "b"}]})
    widget = make_widget(manual_scheduler, source, template=CallableTemplate(fixed_height_label))
    widget.setMaximumHeight(50)
    widget.resize(200, 10)

    with caplog.at_level(logging.WARNING):
        asyncio.run(widget.layout_callback())
        manual_scheduler.flush()

    assert widget.height() == 10
    assert caplog.records == []


def test_direct_state_render_bypasses_source(qapp, manual_scheduler):
    """render_items renders without calling the data source."""
    source = FakeSource(error=AssertionError("must not fetch"))
    widget = make_widget(manual_scheduler, source)

    asyncio.run(widget.controller.render_items([{"t": "z"}]))

    assert texts(widget) == ["z"]
    assert source.calls == []


def test_validation_error_shows_fallback(qapp, manual_scheduler):
    """A non-list payload on first load swaps the placeholder for the fallback."""
    widget = make_widget(manual_scheduler, FakeSource({"items": {"a": 1}}))

    with pytest.raises(ValidationError):
        asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    assert widget._placeholder.isHidden()
    assert not widget._fallback.isHidden()
    assert widget.container.items() == []


def test_stale_failure_keeps_newer_content(qapp, manual_scheduler):
    """An older cycle failing after a newer one applied leaves the visuals alone."""
    source = GatedSource([
        ConnectionError("late failure"),
        {"items": [{"t": "second"}]},
    ])
    widget = make_widget(manual_scheduler, source)

    async def scenario():
        first = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        second = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        source.gates[1].set()
        await second
        source.gates[0].set()
        with pytest.raises(FetchError):
            await first

    asyncio.run(scenario())
    manual_scheduler.flush()

    assert texts(widget) == ["second"]
    assert widget._placeholder.isHidden()
    assert widget._fallback.isHidden()
    assert widget.controller.highest_applied_seq == 2


def test_older_success_after_newer_failure_is_discarded(qapp, manual_scheduler):
    """Once the latest cycle failed, a slower earlier success does not clear the fallback."""
    source = GatedSource([
        {"items": [{"t": "first"}]},
        ConnectionError("network down"),
    ])
    widget = make_widget(manual_scheduler, source)
    events = []
    widget.content_rendered.connect(lambda: events.append(1))

    async def scenario():
        first = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        second = asyncio.create_task(widget.controller.refresh())
        await asyncio.sleep(0)
        source.gates[1].set()
        with pytest.raises(FetchError):
            await second
        source.gates[0].set()
        await first

    asyncio.run(scenario())
    manual_scheduler.flush()

    assert texts(widget) == []
    assert events == []
    assert not widget._fallback.isHidden()
    assert widget.controller.highest_applied_seq == 0


def test_height_follows_wrapped_text(qapp, manual_scheduler, monkeypatch):
    """Word-wrapped items are measured at the host width, not at their one-line hint."""
    source = FakeSource({"items": [{"t": "wrapped words " * 25}]})
    widget = make_widget(manual_scheduler, source)
    widget.resize(120, 10)
    requests = []
    monkeypatch.setattr(widget, "attempt_change_height", requests.append)

    asyncio.run(widget.layout_callback())
    manual_scheduler.flush()

    label = widget.container.items()[0]
    assert label.wordWrap()
    assert requests == [label.heightForWidth(120)]
    assert requests[0] > label.sizeHint().height()
