import json
import os
import re
from dataclasses import dataclass, field
from typing import List

from openai import OpenAI

@dataclass
class GeneratedContent:
    content: str
    excerpt: str
    tags: List[str] = field(default_factory=list)

def _safe_json_extract(text: str) -> dict:
    text = text.strip()
    if text.startswith("{") and text.endswith("}"):
        return json.loads(text)
    m = re.search(r"\{.*\}", text, flags=re.DOTALL)
    if not m:
        raise ValueError("No JSON found in model output")
    return json.loads(m.group(0))

def _template_content(title: str, category: str) -> GeneratedContent:
    excerpt = f"Praktičan pregled teme: {title}. Obaveze poslodavca i koraci za primenu."
    content = f"""
## {title}

### Zakonski okvir
Zakon o bezbednosti i zdravlju na radu ("Sl. glasnik RS", br. 35/2023) uređuje
prava i obaveze poslodavca i zaposlenih.

### Koraci
1. Procenite rizike na svakom radnom mestu i ažurirajte akt o proceni rizika.
2. Obezbedite osposobljavanje zaposlenih za bezbedan i zdrav rad.
3. Vodite propisane evidencije i redovno ih proveravajte.
4. Uključite lice za bezbednost i zdravlje na radu u planiranje mera.
"""
    tags = ["bzr"]
    if category:
        tags.append(category.lower())
    return GeneratedContent(content=content.strip(), excerpt=excerpt, tags=tags)

def generate_content(title: str, category: str = "") -> GeneratedContent:
    """
    Ako je OPENAI_API_KEY zadat, sadržaj generiše model.
    Ako nije, vraća šablon (alat i dalje radi bez mreže).
    """
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    model = os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip()

    if not api_key:
        return _template_content(title, category)

    client = OpenAI(api_key=api_key)

    instructions = (
        "Ti si ekspert za bezbednost i zdravlje na radu u Srbiji.\n"
        "Vrati STROGO JSON sa ključevima:\n"
        "- content: blog post u Markdown formatu (naslovi, liste), latinicom.\n"
        "- excerpt: kratak opis do 200 karaktera.\n"
        "- tags: lista od 3 do 6 kratkih tagova.\n\n"
        "Pravila:\n"
        "- Drži se isključivo važećeg zakonodavstva Republike Srbije.\n"
        "- Navedi konkretne članove zakona gde je moguće.\n"
        "- Ne izmišljaj informacije.\n"
    )

    user_input = (
        f"Naslov: {title}\n"
        f"Kategorija: {category or 'bezbednost na radu'}\n"
        "Napiši tekst."
    )

    resp = client.responses.create(
        model=model,
        instructions=instructions,
        input=user_input,
    )
    data = _safe_json_extract(resp.output_text)

    content = str(data.get("content") or "").strip()
    excerpt = str(data.get("excerpt") or "").strip()
    raw_tags = data.get("tags") or []
    tags = [str(t).strip() for t in raw_tags if str(t).strip()] if isinstance(raw_tags, list) else []

    fallback = _template_content(title, category)
    if not content:
        content = fallback.content
    if not excerpt:
        excerpt = fallback.excerpt
    if len(excerpt) > 200:
        excerpt = excerpt[:197].rstrip() + "..."
    if not tags:
        tags = fallback.tags

    return GeneratedContent(content=content, excerpt=excerpt, tags=tags)
