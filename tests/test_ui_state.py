from app.ui import state as ui


def test_recipient_entry_is_idempotent():
    s = ui.type_recipient_text(ui.ClientState(), "a@x.com,")
    s = ui.type_recipient_text(s, "a@x.com,")

    assert s.recipients == ("a@x.com",)


def test_invalid_address_is_not_tagged():
    s = ui.type_recipient_text(ui.ClientState(), "not-an-email,")

    assert s.recipients == ()
    assert s.recipient_input == "not-an-email"


def test_enter_commits_and_other_keys_do_not():
    s = ui.edit_recipient_input(ui.ClientState(), "  b@y.org ")

    assert ui.press_recipient_key(s, "Tab") is s
    s = ui.press_recipient_key(s, "Enter")
    assert s.recipients == ("b@y.org",)
    assert s.recipient_input == ""


def test_recipients_keep_entry_order_and_remove_by_value():
    s = ui.type_recipient_text(ui.ClientState(), "a@x.com,b@x.com,c@x.com,")
    s = ui.remove_recipient(s, "b@x.com")

    assert s.recipients == ("a@x.com", "c@x.com")


def test_email_shape():
    from app.services.validators import is_valid_email

    assert is_valid_email("a@x.com")
    assert not is_valid_email("a@x")
    assert not is_valid_email("a b@x.com")
    assert not is_valid_email("a@@x.com")


def test_summarize_flow():
    s = ui.ClientState(text="  notes  ", custom_prompt="  ")
    s = ui.begin_summarize(s)

    assert s.summarize_phase is ui.Phase.SUBMITTING
    assert not s.can_summarize
    assert ui.summarize_payload(s) == {"text": "notes"}

    s = ui.summarize_succeeded(s, "short")
    assert s.summarize_phase is ui.Phase.IDLE
    assert s.summary == "short"
    assert s.share_visible
    assert s.alert == ui.Alert("success", "Summary generated successfully!")


def test_blank_text_does_not_submit():
    s = ui.begin_summarize(ui.ClientState(text="   "))

    assert s.summarize_phase is ui.Phase.IDLE
    assert s.alert == ui.Alert("error", "Please enter some text to summarize.")


def test_failure_preserves_typed_state():
    s = ui.ClientState(text="notes", custom_prompt="bullets", recipients=("a@x.com",))
    s = ui.summarize_failed(ui.begin_summarize(s), "Groq API key not configured")

    assert s.text == "notes"
    assert s.custom_prompt == "bullets"
    assert s.recipients == ("a@x.com",)
    assert s.alert == ui.Alert("error", "Groq API key not configured")


def test_share_guards():
    assert ui.begin_share(ui.ClientState()).alert.message == "No summary to share."
    s = ui.begin_share(ui.ClientState(summary="s"))
    assert s.alert.message == "Please add at least one recipient."
    assert s.share_phase is ui.Phase.IDLE


def test_share_success_resets_share_fields():
    s = ui.ClientState(
        summary=" s ",
        show_share=True,
        recipients=("a@x.com",),
        recipient_input="half@",
        email_subject="  ",
    )
    s = ui.begin_share(s)
    assert ui.share_payload(s) == {"summary": "s", "recipients": ["a@x.com"], "subject": "Meeting Summary"}

    s = ui.share_succeeded(s, "Summary shared successfully with 1 recipient(s)")
    assert s.recipients == ()
    assert s.recipient_input == ""
    assert s.email_subject == "Meeting Summary"
    assert s.summary == " s "
    assert s.alert.type == "success"


def test_share_failure_keeps_recipients():
    s = ui.ClientState(summary="s", recipients=("a@x.com",))
    s = ui.share_failed(ui.begin_share(s), None)

    assert s.recipients == ("a@x.com",)
    assert s.alert == ui.Alert("error", "Failed to share summary. Please try again.")


def test_start_over_resets_everything():
    assert ui.start_over() == ui.ClientState()
