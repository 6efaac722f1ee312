"""AI forecasting (Google Gemini)"""
