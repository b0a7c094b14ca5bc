import streamlit as st

from typing import Dict, List

from robo_avatar.config import AvatarConfig
from robo_avatar.fingerprint import digest, selectors
from robo_avatar.generator import AvatarGenerator, default_generator
from robo_avatar.identicon import identicon_png
from robo_avatar.layers import resolve_layers
from robo_avatar.log import setup_logging

EXAMPLES: List[str] = ["hello", "user@example.com", "12345"]

st.set_page_config(layout="wide", page_title="Robot Avatars")


@st.cache_resource
def get_generator() -> AvatarGenerator:
    config = AvatarConfig.from_env()
    setup_logging(config.log_level)
    return default_generator()


def describe(text: str) -> List[Dict[str, object]]:
    return [
        {
            "layer": placement.layer.value,
            "style": placement.style,
            "color": placement.color,
            "x": placement.x,
            "y": placement.y,
        }
        for placement in resolve_layers(selectors(digest(text)))
    ]


# --------- Main App ---------

generator = get_generator()
tab_robot, tab_identicon = st.tabs(["Robot", "Identicon"])

with tab_robot:
    left_col, right_col = st.columns([0.4, 0.6])
    with left_col:
        text: str = st.text_input("Input string", value="hello", key="robo_input")
        if not text:
            st.error("Missing input parameter")
        else:
            avatar = generator.avatar(text)
            st.image(avatar.png, width=300)
            st.caption(f"ETag: {avatar.etag}")
    with right_col:
        if text:
            st.text(f"MD5: {digest(text).hex()}")
            st.dataframe(describe(text), hide_index=True)

    st.divider()
    for col, example in zip(st.columns(len(EXAMPLES)), EXAMPLES):
        with col:
            st.image(generator.generate(example), width=100)
            st.code(f"/robo/{example}")

with tab_identicon:
    identicon_text: str = st.text_input("Input string", value="hello", key="id_input")
    st.image(identicon_png(identicon_text or "/"), width=200)
