"""
文本识别用的固定关键词表
"""

from typing import Tuple

# 出行意图后缀：紧跟在地名之后，表明前面的词是目的地
TRAVEL_INTENT_SUFFIXES: Tuple[str, ...] = (
    "自由行", "周边游", "一日游", "二日游", "两日游", "三日游", "四日游", "五日游", "七日游", "几日游",
    "怎么玩", "玩什么", "吃什么", "必去", "必吃", "好玩",
    "景点", "美食", "攻略", "旅游", "旅行", "游玩", "行程", "小吃", "住宿", "路线", "之旅",
)

# 自然语言出行句式中的介词与动作词
LOCATIVE_PREPOSITIONS: Tuple[str, ...] = ("在", "去", "到", "往", "来", "赴")
# 含介词字但整体不是介词的常用词
NON_LOCATIVE_WORDS = frozenset((
    "现在", "正在", "还在", "实在", "存在", "后来", "原来", "将来", "未来", "本来", "从来",
    "看到", "想到", "得到", "直到", "遇到", "收到", "不到", "回来", "起来", "出来", "过来", "以往",
))
TRAVEL_ACTION_WORDS: Tuple[str, ...] = (
    "旅游", "旅行", "游玩", "观光", "度假", "自驾", "出游", "玩", "看看", "逛逛", "走走",
)

# 地名前常见的动词/代词，截取地名时作为边界
TOKEN_BOUNDARY_CHARS = frozenset("我你他她想要去到在往来赴从游逛玩的和与及跟、，,。.！!？? 　:：;；")

# 重新规划意图关键词（针对用户当前输入）
REPLANNING_KEYWORDS: Tuple[str, ...] = (
    "重新规划", "重新安排", "换个地方", "改变路线", "重新设计",
    "换条线路", "重新来", "再规划一个", "重新制定", "修改行程",
    "换个行程", "另外规划", "重新推荐", "另外推荐", "换个方案",
)

# 旅游类 POI 的类型/名称标识
TOURIST_TYPE_MARKERS: Tuple[str, ...] = (
    "景区", "公园", "寺", "庙", "山", "湖", "河", "博物馆", "纪念馆", "广场", "古迹",
)

# 没有“关键景点”列表时，从正文中抽取景点名的后缀
LANDMARK_SUFFIXES: Tuple[str, ...] = (
    "公园", "寺", "山", "湖", "宫", "庙", "博物馆", "广场", "门", "街",
)

# POI 名称中的营业状态标注
POI_STATUS_MARKERS: Tuple[str, ...] = (
    "暂停开放", "已关闭", "停业", "装修中", "永久关闭", "临时关闭", "营业中", "24小时营业", "节假日休息",
)

# AI 回复的结构标记
TITLE_MARKER = "标题："
KEYWORD_MARKER = "关键景点："
BODY_MARKER = "📍 推荐景点："
DETAIL_MARKER = "【详细规划】"
