from services.chat.response_splitter import REPORT_END_MARKER, REPORT_START_MARKER, split_response


def test_splits_text_around_report():
    split = split_response("Hello --- REPORT START --- • A\n• B --- REPORT END --- Bye")
    assert split.has_report
    assert split.pre_text == "Hello"
    assert split.report == "• A\n• B"
    assert split.post_text == "Bye"


def test_plain_reply_is_returned_unchanged():
    split = split_response("Just chatting  ")
    assert not split.has_report
    assert split.pre_text == "Just chatting  "
    assert split.report is None
    assert split.post_text is None


def test_end_before_start_is_not_a_report():
    text = f"a {REPORT_END_MARKER} b {REPORT_START_MARKER} c"
    split = split_response(text)
    assert not split.has_report
    assert split.pre_text == text


def test_missing_end_marker_is_not_a_report():
    text = f"Summary follows {REPORT_START_MARKER} fever, cough"
    assert split_response(text).pre_text == text
    assert not split_response(text).has_report


def test_second_start_marker_stays_in_report_body():
    text = f"{REPORT_START_MARKER} one {REPORT_START_MARKER} two {REPORT_END_MARKER}"
    split = split_response(text)
    assert split.report == f"one {REPORT_START_MARKER} two"
    assert split.pre_text == ""
    assert split.post_text == ""


def test_only_first_end_marker_is_used():
    text = f"x {REPORT_START_MARKER} r {REPORT_END_MARKER} y {REPORT_END_MARKER} z"
    split = split_response(text)
    assert split.report == "r"
    assert split.post_text == f"y {REPORT_END_MARKER} z"


def test_empty_report_block():
    split = split_response(f"Done.{REPORT_START_MARKER}{REPORT_END_MARKER}")
    assert split.has_report
    assert split.report == ""
    assert split.pre_text == "Done."
