"""Supabase client factory. Client is cached via Streamlit."""
import os

import streamlit as st
from dotenv import load_dotenv
from supabase import create_client, Client

from mocktest.config import SessionConfig, load_config
from mocktest.database import DatabaseClient

load_dotenv()


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


@st.cache_resource
def get_supabase() -> Client:
    return _env_client()


def get_database(client: Client | None = None) -> DatabaseClient:
    return DatabaseClient(client or get_supabase())


def get_session_config(db: DatabaseClient) -> SessionConfig:
    """Env defaults, then system_config overrides."""
    return load_config().with_system_config(db.fetch_system_config())
