"""Streamlit console for the sales CRM."""
