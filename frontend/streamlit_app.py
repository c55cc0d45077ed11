import sys
from pathlib import Path

# Ensure repo root is importable (works regardless of cwd)
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import streamlit as st

st.set_page_config(page_title="Mood Mate", page_icon="🧪", layout="wide")
st.title("Dr. Doof's Mood Mate")
st.write("Use the sidebar to open **Mood Chat** or the **Mood Dashboard**.")
st.caption("Wellbeing companion demo. Not a crisis service and not medical advice.")
