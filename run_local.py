#!/usr/bin/env python3
"""
Script para rodar a API localmente
"""
import uvicorn
from app.config.settings import settings


def main():
    print("🚀 Iniciando B2B SEO Hub localmente...")
    print("="*50)
    print("📡 URLs Locais:")
    print(f"   • API: http://localhost:{settings.api_port}")
    print(f"   • Documentação: http://localhost:{settings.api_port}/docs")
    print(f"   • Dashboard: http://localhost:{settings.api_port}/dashboard")
    print("="*50)
    print()

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )


if __name__ == "__main__":
    main()
