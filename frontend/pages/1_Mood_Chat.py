import os
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import streamlit as st
from frontend.app import send_message, start_session

st.set_page_config(page_title="Mood Chat", page_icon="💬", layout="wide")

if "chat" not in st.session_state:
    st.session_state.chat = []
if "session_id" not in st.session_state:
    st.session_state.session_id = None
if "last" not in st.session_state:
    st.session_state.last = None

with st.sidebar:
    backend_url = st.text_input("Backend URL", os.getenv("BACKEND_URL", "http://localhost:3000"))
    if st.button("New session", use_container_width=True) or st.session_state.session_id is None:
        data, err = start_session(backend_url)
        if err:
            st.error(err)
        else:
            st.session_state.session_id = data["sessionId"]
            st.session_state.chat = [{"role": "assistant", "text": data["message"]}]
            st.session_state.last = None
    st.caption(f"Session: {st.session_state.session_id or '—'}")

st.title("💬 Chat with Dr. Doof")

colL, colR = st.columns([2, 1])

with colL:
    for m in st.session_state.chat:
        st.chat_message(m["role"]).markdown(m["text"])

    msg = st.chat_input("How are you feeling?")
    if msg and st.session_state.session_id:
        st.session_state.chat.append({"role": "user", "text": msg})
        data, err = send_message(backend_url, st.session_state.session_id, msg)
        if err:
            st.session_state.chat.append({"role": "assistant", "text": err})
        else:
            st.session_state.chat.append({"role": "assistant", "text": data["message"]})
            st.session_state.last = data
        st.rerun()

with colR:
    last = st.session_state.last
    st.subheader("Mood")
    if not last:
        st.info("Send a message to see your mood.")
    else:
        stats = last.get("sessionStats", {})
        st.metric("Detected mood", last.get("detectedMood", "neutral"))
        st.metric("Messages this session", stats.get("messageCount", 0))
        if (last.get("triage") or {}).get("level") == "crisis":
            st.error("Please reach out to one of the helplines above. You don't have to go through this alone.")
        st.write("**Try asking:**")
        for s in last.get("suggestions", []):
            st.markdown(f"- {s}")
