"""
Gradio web interface for the Quran memorization trainer.
"""

import logging
from typing import Optional

import gradio as gr

from .api_clients import AlQuranAPIClient
from .audio_processing import AudioCache
from .config import get_settings
from .memorization_session import MemorizationSession
from .phases import MemorizationPhase, PHASE_TITLES
from .progress_store import storage
from .verse_display import render_progress_html, render_verse_html

logger = logging.getLogger(__name__)
settings = get_settings()

quran_client = AlQuranAPIClient()
audio_cache = AudioCache()

PHASE_CHOICES = [(f"{int(phase)}. {title}", int(phase)) for phase, title in PHASE_TITLES.items()]

# Gradio does not run scripts inside gr.HTML, so the highlighter listens from the page head.
# timeupdate does not bubble; a capturing listener on document still sees it.
# The active word is the last one whose start has passed, as in word_timing.active_word_index.
HEAD = """
<script>
(function () {
  function words() {
    return document.querySelectorAll('.hifz-verse[data-highlight="true"] .hifz-word');
  }
  document.addEventListener('timeupdate', function (event) {
    if (!(event.target instanceof HTMLAudioElement)) return;
    var t = event.target.currentTime;
    var spans = words(), active = -1;
    spans.forEach(function (el, i) {
      if (t >= parseFloat(el.dataset.start)) active = i;
    });
    spans.forEach(function (el, i) { el.classList.toggle('hifz-active', i === active); });
  }, true);
  ['ended', 'pause', 'emptied'].forEach(function (name) {
    document.addEventListener(name, function (event) {
      if (!(event.target instanceof HTMLAudioElement)) return;
      if (name === 'pause' && !event.target.ended && event.target.currentTime > 0) return;
      words().forEach(function (el) { el.classList.remove('hifz-active'); });
    }, true);
  });
})();
</script>
"""

# Rewinds the recitation without starting it
RETRY_JS = """
() => {
  document.querySelectorAll('.hifz-audio').forEach(function (audio) {
    audio.pause();
    audio.currentTime = 0;
  });
}
"""

CSS = """
.arabic-text { font-size: 1.8rem; line-height: 2.6; text-align: right; }
.hifz-word { display: inline-block; margin: 0 0.2rem; padding: 0.1rem; border-radius: 4px; transition: all 0.2s; }
.hifz-word:hover { background: rgba(120, 120, 120, 0.15); }
.hifz-active { background: rgba(30, 136, 229, 0.2); font-weight: bold; transform: scale(1.1); }
.hole { display: inline-block; width: 4rem; border-bottom: 2px dashed #888; margin: 0 0.3rem; }
.hifz-prompt { text-align: center; font-style: italic; color: #777; font-size: 1.2rem; margin: 1rem 0; }
.hifz-audio { width: 100%; margin-top: 1rem; }
.hifz-progress-track { width: 100%; height: 1rem; background: #e5e7eb; border-radius: 9999px; }
.hifz-progress-bar { height: 1rem; background: #22c55e; border-radius: 9999px; transition: width 0.3s; }
.hifz-progress-labels { display: flex; justify-content: space-between; font-size: 0.9rem; margin-top: 0.5rem; }
"""


def new_session() -> MemorizationSession:
    return MemorizationSession(
        client=quran_client,
        store=storage,
        user_id=settings.default_user_id,
        audio_cache=audio_cache,
    )


def render(session: MemorizationSession):
    """Map the session state onto the UI components."""
    surah_choices = [(f"{s.number}. {s.english_name} ({s.name})", s.number) for s in session.surahs]
    surah = session.selected_surah
    verse_count = surah.number_of_ayahs if surah else 0

    timings = session.audio_timings() if session.phase is MemorizationPhase.TEXT_WITH_AUDIO else []
    verse_html = render_verse_html(session.current_verse, session.phase, timings, session.audio_url)
    translation = session.current_verse.translation if session.current_verse else ""
    progress_html = render_progress_html(session.phase, session.verse_number, verse_count) if surah else ""
    status = f"⚠️ {session.error}" if session.error else ""

    return (
        session,
        gr.update(choices=surah_choices, value=surah.number if surah else None),
        gr.update(choices=list(range(1, verse_count + 1)), value=session.verse_number if surah else None),
        gr.update(value=int(session.phase)),
        verse_html,
        translation,
        progress_html,
        gr.update(interactive=session.has_previous_verse),
        gr.update(interactive=session.has_next_verse),
        gr.update(interactive=not session.phase.is_last),
        status,
    )


def start(username: str):
    session = new_session()
    session.switch_user(username or settings.default_username)
    session.load_surahs()
    return render(session)


def change_user(session: Optional[MemorizationSession], username: str):
    session = session or new_session()
    session.switch_user(username)
    return render(session)


def change_surah(session: Optional[MemorizationSession], surah_number):
    session = session or new_session()
    if surah_number:
        session.select_surah(int(surah_number))
    return render(session)


def change_verse(session: Optional[MemorizationSession], verse_number):
    session = session or new_session()
    if verse_number:
        session.select_verse(int(verse_number))
    return render(session)


def change_phase(session: Optional[MemorizationSession], phase):
    session = session or new_session()
    session.set_phase(phase)
    return render(session)


def complete_phase(session: Optional[MemorizationSession]):
    session = session or new_session()
    session.next_phase()
    return render(session)


def next_verse(session: Optional[MemorizationSession]):
    session = session or new_session()
    session.next_verse()
    return render(session)


def previous_verse(session: Optional[MemorizationSession]):
    session = session or new_session()
    session.previous_verse()
    return render(session)


def build_app() -> gr.Blocks:
    with gr.Blocks(title="Quran Memorization", head=HEAD, css=CSS) as app:
        # Holds the MemorizationSession; created on page load, never deep-copied afterwards
        session_state = gr.State(None)

        gr.Markdown("# Quran Memorization\nProgressive memorization through 5 phases")

        with gr.Row():
            username = gr.Textbox(value=settings.default_username, label="Learner", scale=1)
            surah_dropdown = gr.Dropdown(choices=[], label="Surah", scale=2)
            verse_dropdown = gr.Dropdown(choices=[], label="Verse", scale=1)

        phase_radio = gr.Radio(choices=PHASE_CHOICES, value=1, label="Memorization Phases")

        verse_html = gr.HTML()
        translation = gr.Textbox(label="Translation", interactive=False, lines=3)

        with gr.Row():
            prev_btn = gr.Button("◀ Previous verse")
            retry_btn = gr.Button("↺ Retry")
            complete_btn = gr.Button("Complete Phase", variant="primary")
            next_btn = gr.Button("Next verse ▶")

        progress_html = gr.HTML()
        status_message = gr.Markdown()

        outputs = [
            session_state, surah_dropdown, verse_dropdown, phase_radio, verse_html,
            translation, progress_html, prev_btn, next_btn, complete_btn, status_message,
        ]

        app.load(fn=start, inputs=username, outputs=outputs)
        # .input fires on user edits only, so re-rendering the dropdowns does not loop
        username.submit(fn=change_user, inputs=[session_state, username], outputs=outputs)
        surah_dropdown.input(fn=change_surah, inputs=[session_state, surah_dropdown], outputs=outputs)
        verse_dropdown.input(fn=change_verse, inputs=[session_state, verse_dropdown], outputs=outputs)
        phase_radio.input(fn=change_phase, inputs=[session_state, phase_radio], outputs=outputs)
        complete_btn.click(fn=complete_phase, inputs=session_state, outputs=outputs)
        next_btn.click(fn=next_verse, inputs=session_state, outputs=outputs)
        prev_btn.click(fn=previous_verse, inputs=session_state, outputs=outputs)
        retry_btn.click(fn=None, js=RETRY_JS)

    return app


def main():
    logging.basicConfig(level=settings.log_level.upper())
    build_app().launch(server_name=settings.host)


if __name__ == "__main__":
    main()
