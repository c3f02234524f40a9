from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics


def test_record_and_summary():
    diagnostics = ExtractionDiagnostics()

    diagnostics.miss("investor", "pan")
    diagnostics.record(DiagnosticKind.SECTION_NOT_FOUND, "folios", "folio_section")
    diagnostics.miss("investor", "mobile")

    assert len(diagnostics) == 3
    assert [e.target for e in diagnostics.events] == ["pan", "folio_section", "mobile"]
    assert diagnostics.summary() == {"field_extraction_miss": 2, "section_not_found": 1}


def test_bound_children_merge_in_order():
    parent = ExtractionDiagnostics()
    first = parent.bind(account_index=0)
    second = parent.bind(account_index=1)

    second.miss("account_fields", "nominee")
    first.miss("account_fields", "bsda", raw="MAYBE")
    parent.merge(first)
    parent.merge(second)

    assert [(e.target, e.context) for e in parent.events] == [
        ("bsda", {"account_index": 0, "raw": "MAYBE"}),
        ("nominee", {"account_index": 1}),
    ]


def test_events_is_a_copy():
    diagnostics = ExtractionDiagnostics()
    diagnostics.miss("meta", "statement_period")

    diagnostics.events.clear()

    assert len(diagnostics) == 1
