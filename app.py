from __future__ import annotations

import logging

import streamlit as st

from study_guider.config import configure_logging, load_config
from study_guider.export import (
    DOCX_FILE_NAME,
    MARKDOWN_FILE_NAME,
    PDF_FILE_NAME,
    to_docx,
    to_markdown,
    to_pdf,
)
from study_guider.gemini_llm import make_client
from study_guider.generation import GenerationError, generate_study_guide
from study_guider.models import AppSettings
from study_guider.pdf_utils import (
    UploadValidationError,
    count_pages,
    estimate_processing_seconds,
    validate_upload,
)
from study_guider.prompts import build_prompt
from study_guider.state import AppState
from study_guider.tts import SAMPLE_RATE, AudioGenerationError, AudioGuide
from study_guider.video import VideoCompanion, VideoGenerationError


logger = logging.getLogger("study_guider.app")


@st.cache_resource(show_spinner=False)
def _client(api_key: str, timeout: float):
    try:
        return make_client(api_key, timeout=timeout)
    except ValueError as e:
        # The SDK refuses to build a client without credentials.
        logger.error("Gemini client unavailable: %s", e)
        return None


def _state() -> AppState:
    if "app_state" not in st.session_state:
        config = load_config()
        configure_logging(config.log_level)
        st.session_state.app_state = AppState.load(config)
    return st.session_state.app_state


st.set_page_config(page_title="Study Guider", layout="wide")

state = _state()
client = _client(state.config.api_key, state.config.request_timeout)

st.title("Study Guider")
st.write("Upload a PDF question bank and get a study guide, solution key and concept roadmap.")

if not state.config.has_api_key:
    st.warning("GEMINI_API_KEY is not set. Generation requests will fail until it is configured.")

with st.sidebar:
    st.header("Settings")
    depth = st.radio("Explanation depth", ["detailed", "concise"], index=["detailed", "concise"].index(state.settings.depth))
    language = st.radio("Language", ["english", "hinglish"], index=["english", "hinglish"].index(state.settings.language))
    focus = st.radio("Focus", ["concept", "exam"], index=["concept", "exam"].index(state.settings.focus))
    state.update_settings(AppSettings(depth=depth, language=language, focus=focus))

    st.divider()
    st.subheader("History")
    if not len(state.history):
        st.caption("No saved guides yet.")
    for item in state.history.items:
        label = f"{item.file_name} · {item.date}"
        if st.button(label, key=f"history_{item.id}", disabled=state.is_busy, use_container_width=True):
            state.show(item)
            st.rerun()
    if len(state.history) and st.button("Clear all", disabled=state.is_busy):
        state.clear_history()
        st.rerun()

upload_tab, guide_tab = st.tabs(["Upload", "Roadmap"])

with upload_tab:
    pdf_file = st.file_uploader("PDF question bank (max 20MB)", type=["pdf"], disabled=state.is_busy)
    custom_prompt = st.text_area(
        "Custom instructions (optional)",
        placeholder="e.g. Focus on detailed math solutions, or prepare for a 10th-grade final exam...",
        disabled=state.is_busy,
    )

    document = None
    if pdf_file is not None:
        try:
            document = validate_upload(pdf_file.name, pdf_file.type, pdf_file.getvalue())
        except UploadValidationError as e:
            st.error(str(e))

    if document is not None:
        pages = count_pages(document.data)
        size_mb = document.size / 1024 / 1024
        st.caption(
            f"{document.file_name} · {size_mb:.2f} MB"
            + (f" · {pages} pages" if pages else "")
            + f" · Estimated time: ~{estimate_processing_seconds(document.size)} seconds"
        )

    run = st.button("Generate Study Roadmap", disabled=document is None or state.is_busy, type="primary")

    if run and document is not None:
        state.begin_processing()
        prompt = build_prompt(settings=state.settings, custom_instructions=custom_prompt)
        with st.status("Consulting AI Mentor...", expanded=True) as status:
            status.write("Analyzing document…")
            try:
                if client is None:
                    raise GenerationError("GEMINI_API_KEY is not configured. Set it and restart the app.")
                answer = generate_study_guide(document, prompt, client=client)
            except GenerationError as e:
                logger.exception("Study guide generation failed")
                state.fail(str(e))
                status.update(label="Failed", state="error")
            except Exception:
                logger.exception("Unexpected error while generating a study guide")
                state.fail("An unexpected error occurred while processing the PDF.")
                status.update(label="Failed", state="error")
            else:
                state.succeed(document.file_name, answer)
                status.update(label="Done", state="complete", expanded=False)

    if state.process.status == "error":
        st.error(state.process.message or "An unexpected error occurred while processing the PDF.")
        if st.button("Try again"):
            state.reset()
            st.rerun()
    elif state.process.status == "success" and state.answer is not None:
        st.success("Study guide ready. Open the Roadmap tab.")

with guide_tab:
    answer = state.answer
    if answer is None:
        st.info("Generate a study guide or open one from the history.")
        st.stop()

    col1, col2 = st.columns([3, 1])

    with col2:
        st.caption(f"Generated by {answer.model_used}")
        if st.button("Process New File"):
            state.reset()
            st.rerun()

        st.subheader("Downloads")
        st.download_button("Export PDF", data=to_pdf(answer), file_name=PDF_FILE_NAME, mime="application/pdf")
        st.download_button(
            "Export DOCX",
            data=to_docx(answer),
            file_name=DOCX_FILE_NAME,
            mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        )
        st.download_button("Export Markdown", data=to_markdown(answer), file_name=MARKDOWN_FILE_NAME, mime="text/markdown")

        st.subheader("Listen")
        if state.audio is None:
            state.audio = AudioGuide(answer.text, client=client)
        if st.button("Listen", disabled=client is None or state.is_busy):
            with st.spinner("Generating narration…"):
                try:
                    state.audio.play()
                except AudioGenerationError as e:
                    st.error(str(e))
                except Exception as e:
                    logger.exception("Audio generation failed")
                    st.error(f"Failed to generate audio: {e}")
        if state.audio.has_audio:
            st.audio(state.audio.play(), sample_rate=SAMPLE_RATE)
            st.caption(f"{state.audio.duration_seconds:.0f} s")
            st.download_button("Download narration (WAV)", data=state.audio.wav_bytes(), file_name="study_guide.wav")

        st.subheader("Explainer video")
        if state.video is None:
            state.video = VideoCompanion(client=client, api_key=state.config.api_key)
        topic = st.text_input("Topic", placeholder="e.g. 'Pythagoras Theorem in real life'")
        if st.button("Generate video", disabled=client is None or not topic.strip() or state.is_busy):
            with st.spinner("Dreaming up visuals… this can take a few minutes."):
                try:
                    state.video.generate(topic, answer.text)
                except VideoGenerationError as e:
                    st.error(str(e))
                except Exception as e:
                    logger.exception("Video generation failed")
                    st.error(f"Failed to generate video: {e}")
        if state.video.clip is not None:
            st.video(state.video.clip.data)
            st.download_button("Download video", data=state.video.clip.data, file_name="explainer.mp4")
            if st.button("Discard video"):
                state.video.release()
                st.rerun()

    with col1:
        # st.markdown renders $...$ / $$...$$ with KaTeX and GitHub-style tables.
        st.markdown(answer.text)
