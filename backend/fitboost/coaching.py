"""Coaching content: greetings, quick actions, exercise catalogue, prompt builders.

Everything here is plain text sent to the assistants. The wording is
Portuguese; ``llm_service`` appends a language instruction when the UI
runs in another language.
"""

from typing import NamedTuple
from urllib.parse import quote_plus

from fitboost.models import WEEKDAYS, AssistantType, ScanType, UserGoal

YOUTUBE_SEARCH_BASE = "https://www.youtube.com/results?search_query="

GREETINGS: dict[AssistantType, str] = {
    "trainer": (
        "**Sessão Iniciada.**\n\n"
        "Sou seu treinador. Para treinos, tabelas simples. Para técnica, envio o link do vídeo."
    ),
    "nutritionist": (
        "**Nutricionista Online.**\n\n"
        "Posso gerar seu plano alimentar (agora com pesagem em gramas), "
        "criar um laudo técnico ou encontrar lojas."
    ),
}


class QuickAction(NamedTuple):
    label: str
    prompt: str


QUICK_ACTIONS: dict[AssistantType, list[QuickAction]] = {
    "trainer": [
        QuickAction(
            "Listar Máquinas",
            "Liste as melhores máquinas de academia para HIPERTROFIA RÁPIDA de TODO O CORPO. "
            "Organize em uma tabela: | Grupo Muscular | Máquina | Benefício Principal |. "
            "Cubra Peito, Costas, Pernas, Ombros e Braços.",
        ),
        QuickAction(
            "Dica Hipertrofia",
            "Dê 3 dicas essenciais para hipertrofia. Use tópicos e explique cada um em 3 linhas.",
        ),
    ],
    "nutritionist": [
        QuickAction(
            "Plano Alimentar",
            "Crie um PLANO ALIMENTAR DIÁRIO completo. Use a Tabela: "
            "| Refeição | Alimentos | Quantidade (g) |. "
            "É OBRIGATÓRIO colocar o peso exato em gramas de cada alimento.",
        ),
        QuickAction(
            "Laudo Nutricional",
            "Gere um LAUDO NUTRICIONAL TÉCNICO para mim. Calcule meu IMC, Taxa Metabólica Basal (TMB) "
            "e Gasto Energético Total (GET). Defina a divisão de macros ideal para meu objetivo. "
            "Apresente como um documento médico.",
        ),
        QuickAction(
            "Suplementação + Laudo",
            "Liste TODOS os suplementos que devo tomar. Tabela: | Suplemento | Dosagem | Horário |. "
            "No final, adicione um breve LAUDO NUTRICIONAL justificando essas escolhas.",
        ),
        QuickAction(
            "Encontrar Locais (Maps)",
            "Encontre 'Lojas de Suplementos' e 'Restaurantes de Comida Saudável' próximos a mim "
            "ou na minha cidade. Liste 3 opções com endereço.",
        ),
    ],
}

# Technique-correction catalogue, grouped by body part.
EXERCISE_DATABASE: dict[str, list[str]] = {
    "Peitoral (Peito)": [
        "Supino Reto com Barra",
        "Supino Inclinado com Halteres",
        "Crossover (Polia Alta)",
        "Peck Deck (Voador)",
        "Flexão de Braço",
    ],
    "Dorsais (Costas)": [
        "Puxada Alta (Pulldown)",
        "Remada Curvada com Barra",
        "Remada Baixa (Triângulo)",
        "Levantamento Terra",
        "Barra Fixa",
    ],
    "Membros Inferiores (Pernas)": [
        "Agachamento Livre",
        "Leg Press 45",
        "Cadeira Extensora",
        "Mesa Flexora",
        "Stiff",
        "Elevação Pélvica",
    ],
    "Ombros (Deltoides)": [
        "Desenvolvimento Militar",
        "Elevação Lateral",
        "Elevação Frontal",
        "Crucifixo Inverso",
    ],
    "Braços (Bíceps/Tríceps)": [
        "Rosca Direta",
        "Rosca Martelo",
        "Tríceps Polia (Corda)",
        "Tríceps Testa",
    ],
}

BODY_SCAN_PROMPT = (
    "AJA COMO UM TREINADOR DE FISICULTURISMO DE ELITE. Analise este físico com extremo rigor técnico. "
    "A primeira imagem é a vista FRONTAL e a segunda a vista de COSTAS. "
    "1. Estime o BF% (Gordura Corporal). "
    "2. Crie uma lista detalhada dos PONTOS FORTES e PONTOS FRACOS musculares. "
    "3. Para cada ponto fraco, prescreva uma estratégia de correção (exercícios, séries, repetições). "
    "4. Use TABELAS e FORMATO MARKDOWN profissional. Seja longo e detalhista."
)

FOOD_SCAN_PROMPT = (
    "AJA COMO UM NUTRICIONISTA ESPORTIVO. Analise este prato. "
    "1. Identifique todos os alimentos. "
    "2. Crie uma TABELA NUTRICIONAL completa com estimativa de Gramas, Calorias, Proteínas, "
    "Carbos e Gorduras para cada item. "
    "3. Calcule o TOTAL da refeição. "
    "4. Dê um veredito técnico sobre a qualidade nutricional. Resposta longa e profissional."
)

SCAN_PROMPTS: dict[ScanType, str] = {
    "body": BODY_SCAN_PROMPT,
    "food": FOOD_SCAN_PROMPT,
}


def _goal_label(goal: UserGoal | None) -> str:
    return goal.value if goal else "Condicionamento geral"


def youtube_search_url(exercise: str) -> str:
    """Fallback YouTube search link for an exercise's correct technique."""
    return YOUTUBE_SEARCH_BASE + "tecnica+correta+" + quote_plus(exercise, safe="()")


def schedule_prompt(days: list[str], goal: UserGoal | None) -> str:
    """Prompt asking the trainer for a weekly plan on the given days.

    Raises:
        ValueError: If no day is given or a name is not a weekday.
    """
    if not days:
        raise ValueError("At least one training day is required.")
    unknown = [d for d in days if d not in WEEKDAYS]
    if unknown:
        raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
    ordered = sorted(set(days), key=WEEKDAYS.index)
    return (
        f"Crie um CRONOGRAMA DE TREINO para: **{', '.join(ordered)}**.\n"
        f"Objetivo: {_goal_label(goal)}.\n\n"
        "REGRAS:\n"
        "1. Tabela Limpa: | Exercício | Séries | Repetições |. (SEM CADÊNCIA, SEM TEMPO).\n"
        "2. Detalhamento: Resuma a execução em 1 parágrafo de 3 linhas para os principais exercícios."
    )


def technique_prompt(exercise: str) -> str:
    """Prompt asking for a technique correction that always leads with a video link."""
    search_url = youtube_search_url(exercise)
    return (
        f"AÇÃO: Corrigir técnica do exercício **{exercise}**.\n\n"
        "PASSO 1 (VIDEO - OBRIGATÓRIO):\n"
        "- Pesquise um vídeo demonstrativo no Google/YouTube.\n"
        "- Se encontrar um vídeo ESPECÍFICO de alta qualidade, use a URL dele.\n"
        f"- SE NÃO TIVER CERTEZA ou a busca falhar, USE ESTA URL DE BUSCA EXATA: {search_url}\n"
        "- OBRIGATÓRIO: Coloque o link no TOPO DA RESPOSTA no formato: "
        "[Assistir Vídeo no YouTube](URL_ESCOLHIDA)\n\n"
        "PASSO 2 (CORREÇÃO):\n"
        "- Liste 3 pontos essenciais para a execução correta.\n"
        "- Liste 1 erro comum a evitar."
    )
