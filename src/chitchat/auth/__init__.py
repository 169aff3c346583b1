from chitchat.auth.token_verifier import TokenVerifier

__all__ = ["TokenVerifier"]
