"""Simulated uploads: nothing is stored, a canned URL or file name is handed back."""
import random
import time

MOCK_AVATARS = [
    "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?auto=format&fit=crop&w=300&q=80",
    "https://images.unsplash.com/photo-1494790108377-be9c29b29330?auto=format&fit=crop&w=300&q=80",
    "https://images.unsplash.com/photo-1500648767791-00dcc994a43e?auto=format&fit=crop&w=300&q=80",
    "https://images.unsplash.com/photo-1534528741775-53994a69daeb?auto=format&fit=crop&w=300&q=80",
    "https://images.unsplash.com/photo-1539571696357-5a69c17a67c6?auto=format&fit=crop&w=300&q=80",
]

MOCK_PORTFOLIO = [
    "https://images.unsplash.com/photo-1593030761757-71bd90dbe78db?auto=format&fit=crop&w=800&q=80",
    "https://images.unsplash.com/photo-1594938298603-c8148c4dae35?auto=format&fit=crop&w=800&q=80",
    "https://images.unsplash.com/photo-1598554747436-c9293d6a70b4?auto=format&fit=crop&w=800&q=80",
    "https://images.unsplash.com/photo-1489987707025-afc232f7ea0f?auto=format&fit=crop&w=800&q=80",
    "https://images.unsplash.com/photo-1556905055-8f358a7a47b2?auto=format&fit=crop&w=800&q=80",
    "https://images.unsplash.com/photo-1558769132-cb1aea458c5e?auto=format&fit=crop&w=800&q=80",
]


def random_avatar(rng: random.Random | None = None) -> str:
    return (rng or random).choice(MOCK_AVATARS)


def random_portfolio_image(rng: random.Random | None = None) -> str:
    return (rng or random).choice(MOCK_PORTFOLIO)


def wizard_portfolio_name() -> str:
    return f"img_{int(time.time() * 1000)}.jpg"


def design_file_names(rng: random.Random | None = None) -> list[str]:
    stamp = int(time.time() * 1000)
    return [f"Design_Spec_{stamp}.pdf", f"Pattern_v{(rng or random).randint(0, 4)}.ai"]
