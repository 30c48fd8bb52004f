"""Prompt templates for the six learning tasks.

The wording is tuned for Chinese-speaking learners of English; every prompt
spells out the exact JSON shape expected back and asks for plain JSON.
"""
import json
from typing import Any, List

_LEVEL_HINTS = {
    "cet4": "请提取CET-4以上难度的单词，即大学英语四级以上水平的词汇",
    "cet6": "请提取CET-6以上难度的单词，即大学英语六级以上水平的词汇",
    "advanced": "请提取高级词汇，即专业英语或学术英语中常见的高难度词汇",
}
_DEFAULT_LEVEL_HINT = "请提取各种难度级别的值得学习的单词"

_REPORT_NAMES = {"weekly": "周报", "monthly": "月报"}
_DEFAULT_REPORT_NAME = "学期报告"

_PLAIN_JSON = "请严格按照以下JSON格式返回，且包含以下字段，注意：输出格式为纯文本且无任何其他标识和符号："

_QUIZ_SHAPE = """[
  {
    "question": "问题内容",
    "options": ["选项A", "选项B", "选项C", "选项D"],
    "correctIndex": 0,
    "explanation": "为什么这是正确答案的解释"
  }
]"""

_READING_VOCAB_SHAPE = """  "vocabulary": [
    {
      "word": "单词",
      "phonetic": "音标",
      "meaning": "中文释义",
      "example": "例句"
    }
  ]"""


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def build_extract_words_prompt(text: str, max_words: int = 10, level: str = "all") -> str:
    level_hint = _LEVEL_HINTS.get(level, _DEFAULT_LEVEL_HINT)
    return f"""请从以下英语文本中提取{max_words}个单词或短语，{level_hint}，并为每个单词提供以下信息：
1. 单词本身
2. 音标
3. 中文定义
4. 词源简介
5. 英语例句
6. 例句中文翻译

{_PLAIN_JSON}
[
  {{
    "word": "单词",
    "phonetic": "音标",
    "definition": "定义",
    "etymology": "词源",
    "example": "例句",
    "exampleTranslation": "例句翻译"
  }}
]

文本：{text}"""


def build_analyze_sentence_prompt(sentence: str) -> str:
    return f"""请你作为一位专业的英语语法分析专家，对下面这个英文句子进行全面细致的语法分析。请按照以下六个部分逐一分析，并用中文准确无误的输出结果：
1. 句子结构（简单句、复合句、复杂句等）
2. 从句分析（如果有）
3. 时态分析
4. 句子成分标注（主语、谓语、宾语、定语、状语、补语、同位语等）
5. 重要短语解析
6. 语法要点解释

{_PLAIN_JSON}
{{
  "structure": {{
    "type": "句子类型",
    "explanation": "详细的句子结构解释"
  }},
  "clauses": [
    {{
      "text": "从句文本",
      "type": "从句类型",
      "function": "在句中的功能"
    }}
  ],
  "tense": [{{
    "name": "时态名称",
    "explanation": "时态解释"
  }}],
  "components": [
    {{
      "text": "成分文本",
      "type": "成分类型",
      "explanation": "成分解释"
    }}
  ],
  "phrases": [
    {{
      "text": "短语文本",
      "type": "短语类型",
      "explanation": "短语解释"
    }}
  ],
  "grammarPoints": [
    {{
      "point": "语法点",
      "explanation": "语法解释"
    }}
  ]
}}

句子：{sentence}"""


def build_reading_content_prompt(text: str, language: str = "en") -> str:
    if language == "en":
        return f"""请作为一位专业的中英文翻译专家，在准确传达原文意思，语言自然流畅，符合目标语言文化习惯的要求下，将以下英文文本翻译成中文，并提取重要词汇：

英文原文：{text}

请提供以下内容：
1. 保持原始英文文本不变
2. 高质量的中文翻译
3. 保持原文意境与情感
4. 如遇文化差异、习语或专有名词，请合理本地化处理，并保持专业性
5. 从文本中提取10个以内高频词汇，包含：英文单词、音标、中文释义、例句

{_PLAIN_JSON}
{{
  "english": "原始英文文本",
  "chinese": "中文翻译",
{_READING_VOCAB_SHAPE}
}}"""

    return f"""请作为一位专业的中英文翻译专家，在准确传达原文意思，语言自然流畅，符合目标语言文化习惯的要求下，请将以下中文文本翻译成英文，并提取重要词汇：

中文原文：{text}

请提供以下内容：
1. 保持原始中文文本不变
2. 高质量的英文翻译
3. 保持原文意境与情感
4. 如遇文化差异、习语或专有名词，请合理本地化处理，并保持专业性
5. 从英文翻译中提取10个以内高频词汇，包含：英文单词、音标、中文释义、例句

{_PLAIN_JSON}
{{
  "english": "英文翻译",
  "chinese": "原始中文文本",
{_READING_VOCAB_SHAPE}
}}"""


def build_reading_questions_prompt(reading: str, question_count: int = 5) -> str:
    return f"""请根据以下英语内容，生成{question_count}道多选题测试阅读理解：

内容：{reading}

请生成{question_count}道单选题，每题4个选项，只有1个正确答案。
每道题目应包含：问题、4个选项、正确答案索引（0-3）、解释。

请严格按照以下JSON格式返回，且包含以下字段，注意：输出格式为纯文本且无任何其他标识（Markdown、HTML等）和符号：
{_QUIZ_SHAPE}"""


def build_vocabulary_questions_prompt(vocabulary: List[Any], question_count: int = 5) -> str:
    return f"""请根据以下词汇列表，生成{question_count}道单选题测试词汇掌握程度：

{_dump(vocabulary)}

请生成{question_count}道单选题，每题4个选项，只有1个正确答案。
题目类型可以包括：选择正确释义、选择正确用法、选择近义词、选择反义词等。
每道题目应包含：问题、4个选项、正确答案索引（0-3）、解释。

{_PLAIN_JSON}
{_QUIZ_SHAPE}"""


def build_learning_report_prompt(report_type: str, learning_data: Any) -> str:
    report_name = _REPORT_NAMES.get(report_type, _DEFAULT_REPORT_NAME)
    return f"""请根据以下学习数据，生成一份{report_name}：

学习数据：{_dump(learning_data)}

请分析以下内容：
1. 学习时间统计和趋势
2. 单词学习情况（数量、记忆效果）
3. 阅读学习情况（数量、难度、主题分布）
4. 测试成绩分析（平均分、进步情况）
5. 学习优势和弱点
6. 针对性的学习建议

请以JSON格式返回，格式为：
{{
  "title": "报告标题",
  "period": "报告周期",
  "summary": "总体学习情况概述",
  "timeStats": {{
    "totalHours": 0,
    "averageDaily": 0,
    "trend": "上升/下降/稳定"
  }},
  "vocabulary": {{
    "learned": 0,
    "mastered": 0,
    "needReview": 0
  }},
  "reading": {{
    "articles": 0,
    "topTopics": ["常见主题1", "常见主题2"],
    "averageDifficulty": "难度评价"
  }},
  "tests": {{
    "completed": 0,
    "averageScore": 0,
    "improvement": "进步情况"
  }},
  "strengths": ["优势1", "优势2"],
  "weaknesses": ["弱点1", "弱点2"],
  "suggestions": ["建议1", "建议2", "建议3"]
}}"""
