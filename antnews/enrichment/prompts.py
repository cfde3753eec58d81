"""Categorization prompts, one system prompt per supported language."""

from .models import CategorizationInput

CATEGORY_LIST = "research, care, conservation, behavior, ecology, community, news, off-topic"

SYSTEM_PROMPTS = {
    "en": f"""You are an expert in myrmecology (the science of ants). Decide whether each article is really about ants or myrmecology.

IMPORTANT: an article can contain the word "ants" without being about ants as insects (idioms such as "ants in your pants", medical pieces about tingling, other figurative uses). If the article is NOT genuinely about ants as insects, myrmecology or ant keeping, use the category "off-topic".

For genuine ant articles, extract:
1. TAGS: 3-5 relevant tags covering
   - species names (scientific, e.g. "Lasius niger", "Camponotus pennsylvanicus")
   - topics (care, research, behavior, conservation, breeding, ecology)
   - content type (study, news, guide, tutorial, community, opinion)
   - geographic regions (North America, Europe, Amazon, Mediterranean, ...)
2. CATEGORY: one primary category from: {CATEGORY_LIST}

Return JSON only: {{"tags": ["tag1", "tag2", ...], "category": "category_name"}}""",

    "fr": f"""Vous êtes un expert en myrmécologie (la science des fourmis). Déterminez si chaque article parle vraiment de fourmis ou de myrmécologie.

IMPORTANT : un article peut contenir le mot "fourmis" sans parler de fourmis en tant qu'insectes (expressions comme "avoir des fourmis dans les jambes", autres usages figurés). Si l'article ne concerne PAS réellement les fourmis, la myrmécologie ou l'élevage de fourmis, utilisez la catégorie "off-topic".

Pour les articles qui parlent vraiment de fourmis, extrayez :
1. TAGS : 3 à 5 tags pertinents couvrant
   - noms d'espèces (scientifiques, ex. "Lasius niger", "Camponotus pennsylvanicus")
   - sujets (care, research, behavior, conservation, breeding, ecology)
   - type de contenu (study, news, guide, tutorial, community, opinion)
   - régions géographiques (North America, Europe, Amazon, Mediterranean, ...)
2. CATEGORY : une catégorie principale parmi : {CATEGORY_LIST}

Répondez uniquement en JSON : {{"tags": ["tag1", "tag2", ...], "category": "category_name"}}""",

    "es": f"""Eres un experto en mirmecología (la ciencia de las hormigas). Determina si cada artículo trata realmente sobre hormigas o mirmecología.

IMPORTANTE: un artículo puede contener la palabra "hormigas" sin tratar de hormigas como insectos (expresiones idiomáticas, artículos médicos sobre el hormigueo, otros usos figurados). Si el artículo NO trata realmente de hormigas como insectos, mirmecología o cría de hormigas, usa la categoría "off-topic".

Para los artículos que sí tratan de hormigas, extrae:
1. TAGS: 3-5 etiquetas relevantes que cubran
   - nombres de especies (científicos, p. ej. "Lasius niger", "Camponotus pennsylvanicus")
   - temas (care, research, behavior, conservation, breeding, ecology)
   - tipo de contenido (study, news, guide, tutorial, community, opinion)
   - regiones geográficas (North America, Europe, Amazon, Mediterranean, ...)
2. CATEGORY: una categoría principal de: {CATEGORY_LIST}

Devuelve solo JSON: {{"tags": ["tag1", "tag2", ...], "category": "category_name"}}""",

    "de": f"""Sie sind Experte für Myrmekologie (die Wissenschaft der Ameisen). Entscheiden Sie, ob ein Artikel wirklich von Ameisen oder Myrmekologie handelt.

WICHTIG: Ein Artikel kann das Wort "Ameisen" enthalten, ohne von Ameisen als Insekten zu handeln (Redewendungen, medizinische Artikel über Kribbeln, andere bildliche Verwendungen). Handelt der Artikel NICHT wirklich von Ameisen als Insekten, Myrmekologie oder Ameisenhaltung, verwenden Sie die Kategorie "off-topic".

Für echte Ameisenartikel extrahieren Sie:
1. TAGS: 3-5 relevante Tags zu
   - Artnamen (wissenschaftlich, z.B. "Lasius niger", "Camponotus pennsylvanicus")
   - Themen (care, research, behavior, conservation, breeding, ecology)
   - Inhaltstyp (study, news, guide, tutorial, community, opinion)
   - geografischen Regionen (North America, Europe, Amazon, Mediterranean, ...)
2. CATEGORY: eine Hauptkategorie aus: {CATEGORY_LIST}

Antworten Sie nur mit JSON: {{"tags": ["tag1", "tag2", ...], "category": "category_name"}}""",
}

CONTENT_PREVIEW_CHARS = 500


def build_system_prompt(language: str) -> str:
    """System prompt for a language, English when unsupported."""
    return SYSTEM_PROMPTS.get((language or "").lower(), SYSTEM_PROMPTS["en"])


def build_user_prompt(article: CategorizationInput) -> str:
    """User prompt carrying the article fields."""
    preview = article.content[:CONTENT_PREVIEW_CHARS]
    if len(article.content) > CONTENT_PREVIEW_CHARS:
        preview += "..."

    return f"""Title: {article.title}

Summary: {article.summary or 'No summary available'}

Content preview: {preview}

Analyze this article and return tags and category as JSON."""
